from __future__ import annotations

import logging
from typing import Callable, Mapping

from fastapi import HTTPException

from standup.config import settings
from standup.entries import build_standup_entry, resolve_display_name
from standup.gateway import GatewayConfigurationError, GatewayError, GeminiStandupGateway
from standup.models import StandupEntry
from standup.storage import HistoryStore, StorageError

logger = logging.getLogger("standup.api")

GatewayGetter = Callable[[], GeminiStandupGateway]
HistoryStoreGetter = Callable[[], HistoryStore]

DEFAULT_AUDIO_MIME_TYPE = "audio/webm"
NO_SPEECH_TRANSCRIPT = "No speech detected."
MISSING_API_KEY_MESSAGE = (
    "Missing Gemini API key. Set GEMINI_API_KEY on the server or provide x-gemini-api-key in the request."
)


def resolve_request_api_key(headers: Mapping[str, str]) -> str | None:
    header_key = (headers.get("x-gemini-api-key") or "").strip()
    if header_key:
        return header_key

    authorization = (headers.get("authorization") or "").strip()
    if authorization.lower().startswith("bearer "):
        bearer_token = authorization[len("bearer ") :].strip()
        if bearer_token:
            return bearer_token

    return settings.gemini_api_key.strip() or None


def _require_api_key(headers: Mapping[str, str]) -> str:
    api_key = resolve_request_api_key(headers)
    if not api_key:
        raise HTTPException(status_code=400, detail=MISSING_API_KEY_MESSAGE)
    return api_key


def _invoke_gateway(call: Callable[[], str]) -> str:
    try:
        return call()
    except GatewayConfigurationError as exc:
        raise HTTPException(status_code=400, detail=MISSING_API_KEY_MESSAGE) from exc
    except GatewayError as exc:
        raise HTTPException(
            status_code=502,
            detail={"message": "Gemini request failed.", "error": exc.details or str(exc)},
        ) from exc


def _persist(entry: StandupEntry, get_history_store: HistoryStoreGetter) -> None:
    try:
        get_history_store().save_entry(entry)
    except StorageError as exc:
        raise HTTPException(
            status_code=500,
            detail={"message": "Failed to persist standup entry.", "error": str(exc)},
        ) from exc
    logger.info(
        "standup_entry_created",
        extra={
            "event": "standup_entry_created",
            "entry_id": entry.id,
            "date_iso": entry.date_iso,
            "markdown_file_name": entry.markdown_file_name,
        },
    )


def ingest_audio_standup(
    *,
    audio: bytes,
    mime_type: str | None,
    display_name: str | None,
    headers: Mapping[str, str],
    get_gateway: GatewayGetter,
    get_history_store: HistoryStoreGetter,
) -> StandupEntry:
    api_key = _require_api_key(headers)
    if not audio:
        raise HTTPException(status_code=400, detail="Audio file is empty.")
    if len(audio) > settings.max_audio_bytes:
        max_mb = settings.max_audio_bytes // (1024 * 1024)
        raise HTTPException(
            status_code=413,
            detail=f"Audio file is too large. Max supported size is {max_mb}MB.",
        )

    gateway = get_gateway()
    model_text = _invoke_gateway(
        lambda: gateway.structure_audio(audio, mime_type or DEFAULT_AUDIO_MIME_TYPE, api_key=api_key)
    )
    entry = build_standup_entry(
        display_name=resolve_display_name(display_name, settings.default_standup_name),
        model_text=model_text,
        fallback_transcript=NO_SPEECH_TRANSCRIPT,
    )
    _persist(entry, get_history_store)
    return entry


def ingest_text_standup(
    *,
    text: str | None,
    display_name: str | None,
    headers: Mapping[str, str],
    get_gateway: GatewayGetter,
    get_history_store: HistoryStoreGetter,
) -> StandupEntry:
    api_key = _require_api_key(headers)
    user_text = (text or "").strip()
    if not user_text:
        raise HTTPException(status_code=400, detail="No text provided.")
    if len(user_text) > settings.max_text_chars:
        raise HTTPException(
            status_code=413,
            detail=f"Text is too long. Please keep it under {settings.max_text_chars:,} characters.",
        )

    gateway = get_gateway()
    model_text = _invoke_gateway(lambda: gateway.structure_text(user_text, api_key=api_key))
    entry = build_standup_entry(
        display_name=resolve_display_name(display_name, settings.default_standup_name),
        model_text=model_text,
        fallback_transcript=user_text,
    )
    _persist(entry, get_history_store)
    return entry
