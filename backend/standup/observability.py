from __future__ import annotations

from contextvars import ContextVar, Token
from datetime import datetime, timezone
import json
import logging
import re
from typing import Any, Mapping
from uuid import uuid4


REQUEST_ID_CONTEXT: ContextVar[str] = ContextVar("request_id", default="-")
REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")
_LOGGING_CONFIGURED = False

SENSITIVE_KEY_NAMES = {
    "authorization",
    "cookie",
    "set-cookie",
    "key",
    "api_key",
    "apikey",
    "x_gemini_api_key",
    "x_goog_api_key",
    "gemini_api_key",
    "password",
    "email",
    "phone",
}
SENSITIVE_KEY_FRAGMENTS = (
    "api_key",
    "token",
    "secret",
    "password",
)

BEARER_PATTERN = re.compile(r"(?i)\bBearer\s+[A-Za-z0-9\-._~+/]+=*")
GOOGLE_API_KEY_PATTERN = re.compile(r"\bAIza[0-9A-Za-z_\-]{35}\b")
INLINE_KEY_PATTERN = re.compile(r"(?i)\b(api[_-]?key|key)(\s*[:=]\s*)([A-Za-z0-9_\-]{16,})")
EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_PATTERN = re.compile(r"\b(?:\+?1[-.\s]?)?(?:\(?\d{3}\)?[-.\s]?)\d{3}[-.\s]?\d{4}\b")


def normalize_request_id(candidate: str | None) -> str:
    if candidate:
        trimmed = candidate.strip()
        if REQUEST_ID_PATTERN.fullmatch(trimmed):
            return trimmed
    return str(uuid4())


def set_request_id(request_id: str) -> Token[str]:
    return REQUEST_ID_CONTEXT.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    REQUEST_ID_CONTEXT.reset(token)


def get_request_id() -> str:
    return REQUEST_ID_CONTEXT.get()


def _looks_sensitive_key(key: str) -> bool:
    normalized = key.strip().lower().replace("-", "_")
    if normalized in SENSITIVE_KEY_NAMES:
        return True
    return any(fragment in normalized for fragment in SENSITIVE_KEY_FRAGMENTS)


def _redact_string(value: str, *, max_length: int) -> str:
    redacted = BEARER_PATTERN.sub("Bearer [REDACTED]", value)
    redacted = GOOGLE_API_KEY_PATTERN.sub("[REDACTED_API_KEY]", redacted)
    redacted = INLINE_KEY_PATTERN.sub(r"\1\2[REDACTED]", redacted)
    redacted = EMAIL_PATTERN.sub("[REDACTED_EMAIL]", redacted)
    redacted = PHONE_PATTERN.sub("[REDACTED_PHONE]", redacted)
    if len(redacted) > max_length:
        return f"{redacted[:max_length]}...[truncated]"
    return redacted


def sanitize_for_logging(value: Any, *, max_string_length: int = 240) -> Any:
    """Redact credentials and contact details before a value reaches a log line.

    Standup transcripts are free text spoken by a person, so string values are
    scrubbed as well as keys, and long strings are cut to ``max_string_length``.
    """
    if value is None:
        return None

    if isinstance(value, Mapping):
        sanitized: dict[str, Any] = {}
        for key, item in value.items():
            key_text = str(key)
            if _looks_sensitive_key(key_text):
                sanitized[key_text] = "[REDACTED]"
                continue
            sanitized[key_text] = sanitize_for_logging(item, max_string_length=max_string_length)
        return sanitized

    if isinstance(value, (list, tuple)):
        items = [sanitize_for_logging(item, max_string_length=max_string_length) for item in value]
        return items if isinstance(value, list) else tuple(items)

    if isinstance(value, bytes):
        return f"[{len(value)} bytes]"

    if isinstance(value, str):
        return _redact_string(value, max_length=max_string_length)

    return value


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = get_request_id()
        return True


class JsonFormatter(logging.Formatter):
    _STANDARD_ATTRS = set(
        logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__.keys()
    ) | {"message", "asctime", "taskName"}

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", get_request_id()),
        }

        for key, value in record.__dict__.items():
            if key in self._STANDARD_ATTRS or key == "request_id":
                continue
            payload[key] = sanitize_for_logging(value)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(level_name: str) -> None:
    global _LOGGING_CONFIGURED
    level = getattr(logging, level_name.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    if _LOGGING_CONFIGURED:
        return

    if any(getattr(handler, "_standup_handler", False) for handler in root.handlers):
        _LOGGING_CONFIGURED = True
        return

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIdFilter())
    setattr(handler, "_standup_handler", True)
    root.addHandler(handler)
    _LOGGING_CONFIGURED = True
