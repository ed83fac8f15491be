from __future__ import annotations

from datetime import datetime, timezone
import logging
from uuid import uuid4

from standup.envelope import parse_model_envelope
from standup.models import StandupEntry
from standup.normalization import normalize_sections
from standup.rendering import format_standup, markdown_file_name, to_markdown

logger = logging.getLogger("standup.entries")

FALLBACK_DISPLAY_NAME = "Developer"


def resolve_display_name(candidate: str | None, default_name: str | None = None) -> str:
    name = (candidate or "").strip()
    if name:
        return name
    return (default_name or "").strip() or FALLBACK_DISPLAY_NAME


def format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_standup_entry(
    *,
    display_name: str,
    model_text: str,
    fallback_transcript: str,
    now: datetime | None = None,
) -> StandupEntry:
    """Turn one raw model response into a complete, rendered standup entry.

    ``fallback_transcript`` stands in for the transcript when the model output
    does not carry one (the typed text, or a placeholder for audio).
    """
    moment = now or datetime.now(timezone.utc)
    date_iso = moment.astimezone(timezone.utc).date().isoformat()

    envelope = parse_model_envelope(model_text)
    raw_transcript = envelope.raw_transcript or fallback_transcript
    sections = normalize_sections(envelope, raw_transcript)
    formatted_text = format_standup(display_name, sections)

    logger.info(
        "model_envelope_parsed",
        extra={
            "event": "model_envelope_parsed",
            "has_transcript": envelope.raw_transcript is not None,
            "provided_sections": sorted(envelope.sections()),
            "bullet_counts": {name: len(items) for name, items in sections.model_dump().items()},
        },
    )

    return StandupEntry(
        id=str(uuid4()),
        date_iso=date_iso,
        display_name=display_name,
        raw_transcript=raw_transcript,
        formatted_text=formatted_text,
        markdown_content=to_markdown(date_iso, formatted_text),
        markdown_file_name=markdown_file_name(date_iso),
        sections=sections,
        created_at=format_timestamp(moment),
    )
