from __future__ import annotations

import json
import re
from typing import Any, Callable

from standup.models import SECTION_NAMES, ModelEnvelope


FENCED_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*(.*?)\s*```", flags=re.IGNORECASE | re.DOTALL)
SECTION_ALIASES: dict[str, str] = {
    "yesterday": "y",
    "today": "t",
    "impediments": "i",
}

ObjectExtractor = Callable[[str], dict[str, Any] | None]


def _parse_object(raw: str) -> dict[str, Any] | None:
    candidate = raw.strip()
    if not candidate:
        return None
    try:
        parsed = json.loads(candidate)
    except (ValueError, RecursionError):
        return None
    if isinstance(parsed, dict):
        return parsed
    return None


def _parse_fenced_object(raw: str) -> dict[str, Any] | None:
    fenced = FENCED_BLOCK_PATTERN.search(raw)
    if not fenced or not fenced.group(1):
        return None
    return _parse_object(fenced.group(1))


_EXTRACTORS: tuple[ObjectExtractor, ...] = (_parse_object, _parse_fenced_object)


def extract_model_object(raw: str) -> dict[str, Any] | None:
    if not isinstance(raw, str):
        return None
    for extractor in _EXTRACTORS:
        parsed = extractor(raw)
        if parsed is not None:
            return parsed
    return None


def coerce_text(value: Any) -> str:
    """Render one section element as text; never raises."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    try:
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=repr)
        return str(value)
    except (TypeError, ValueError, RecursionError):
        # Oversized ints, non-string keys and self-referencing containers.
        return object.__repr__(value)


def _parse_section(payload: dict[str, Any], section: str) -> list[str] | None:
    value = payload.get(section)
    if value is None:
        value = payload.get(SECTION_ALIASES[section])
    if not isinstance(value, list):
        return None
    items = [coerce_text(item) for item in value]
    return [item for item in items if item.strip()]


def parse_model_envelope(raw: str) -> ModelEnvelope:
    """Extract the transcript and section lists from raw model output.

    Tries the whole text as a JSON object first, then the first fenced code
    block. Anything else yields an empty envelope; this function does not raise.
    """
    payload = extract_model_object(raw)
    if payload is None:
        return ModelEnvelope()

    transcript = payload.get("rawTranscript")
    raw_transcript = transcript.strip() if isinstance(transcript, str) and transcript.strip() else None

    sections = {section: _parse_section(payload, section) for section in SECTION_NAMES}
    return ModelEnvelope(raw_transcript=raw_transcript, **sections)


def parse_model_payload(raw: str) -> dict[str, list[str]]:
    return parse_model_envelope(raw).sections()
