from __future__ import annotations

import base64
import logging
import time
from typing import Any

import httpx

from standup.config import Settings

logger = logging.getLogger("standup.gateway")

MAX_ERROR_DETAIL_CHARS = 1200

STANDUP_AUDIO_PROMPT = """
You are formatting a developer daily standup.
Analyze the audio and produce JSON only with these keys:
{
  "rawTranscript": "string",
  "yesterday": ["string"],
  "today": ["string"],
  "impediments": ["string"]
}

Rules:
- Keep output concise and action oriented.
- Remove filler words.
- If no impediments are mentioned, set impediments to ["None"].
- If section markers are missing, infer from context.
- Do not include markdown.
- Do not include extra keys.
""".strip()

STANDUP_TEXT_PROMPT = """
You are formatting a developer daily standup.
The user has typed a casual, conversational description of their work.
Analyze the text and produce JSON only with these keys:
{
  "rawTranscript": "string",
  "yesterday": ["string"],
  "today": ["string"],
  "impediments": ["string"]
}

Rules:
- "rawTranscript" should be the original text the user provided.
- Keep output concise and action oriented.
- Remove filler words.
- If no impediments are mentioned, set impediments to ["None"].
- If section markers are missing, infer from context.
- Do not include markdown.
- Do not include extra keys.
""".strip()


class GatewayError(RuntimeError):
    """Raised when the model gateway cannot be reached or rejects a request."""

    def __init__(self, message: str, *, status_code: int | None = None, details: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class GatewayConfigurationError(GatewayError):
    """Raised when no API key is available for the model gateway."""


class GeminiStandupGateway:
    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        self._settings = settings
        self._client = client or httpx.Client(timeout=settings.gemini_timeout_seconds)

    def structure_audio(self, audio: bytes, mime_type: str, *, api_key: str | None = None) -> str:
        parts = [
            {"text": STANDUP_AUDIO_PROMPT},
            {
                "inlineData": {
                    "mimeType": mime_type,
                    "data": base64.b64encode(audio).decode("ascii"),
                }
            },
        ]
        return self._generate(parts, api_key=api_key, input_kind="audio", input_size=len(audio))

    def structure_text(self, text: str, *, api_key: str | None = None) -> str:
        parts = [{"text": STANDUP_TEXT_PROMPT}, {"text": text}]
        return self._generate(parts, api_key=api_key, input_kind="text", input_size=len(text))

    def _resolve_api_key(self, override: str | None) -> str:
        key = (override or "").strip() or self._settings.gemini_api_key.strip()
        if not key:
            raise GatewayConfigurationError("Gemini API key is not configured.")
        return key

    def _endpoint(self) -> str:
        base_url = self._settings.gemini_base_url.rstrip("/")
        return f"{base_url}/models/{self._settings.gemini_model}:generateContent"

    def _generate(
        self,
        parts: list[dict[str, object]],
        *,
        api_key: str | None,
        input_kind: str,
        input_size: int,
    ) -> str:
        key = self._resolve_api_key(api_key)
        body = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "temperature": self._settings.gemini_temperature,
                "responseMimeType": "application/json",
            },
        }

        started = time.perf_counter()
        try:
            response = self._client.post(
                self._endpoint(),
                json=body,
                headers={"Content-Type": "application/json", "x-goog-api-key": key},
                timeout=self._settings.gemini_timeout_seconds,
            )
        except httpx.HTTPError as exc:
            self._log_failure(started, input_kind, error=str(exc))
            raise GatewayError(f"Gemini request failed for model '{self._settings.gemini_model}': {exc}") from exc

        if response.status_code >= 400:
            details = response.text[:MAX_ERROR_DETAIL_CHARS]
            self._log_failure(started, input_kind, error=details, status_code=response.status_code)
            raise GatewayError(
                f"Gemini returned HTTP {response.status_code}.",
                status_code=response.status_code,
                details=details,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            self._log_failure(started, input_kind, error="non-JSON response body")
            raise GatewayError("Gemini response body was not valid JSON.") from exc

        text = self._extract_text(payload)
        logger.info(
            "gemini_invoke_completed",
            extra={
                "event": "gemini_invoke_completed",
                "model": self._settings.gemini_model,
                "input_kind": input_kind,
                "input_size": input_size,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "response_chars": len(text),
            },
        )
        return text

    def _log_failure(self, started: float, input_kind: str, *, error: str, status_code: int | None = None) -> None:
        logger.warning(
            "gemini_invoke_failed",
            extra={
                "event": "gemini_invoke_failed",
                "model": self._settings.gemini_model,
                "input_kind": input_kind,
                "status_code": status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "error": error,
            },
        )

    @staticmethod
    def _extract_text(payload: Any) -> str:
        if not isinstance(payload, dict):
            return ""
        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return ""
        content = candidates[0].get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return ""
        texts: list[str] = []
        for part in parts:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                texts.append(part["text"])
        return "".join(texts).strip()
