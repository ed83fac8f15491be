from __future__ import annotations

from datetime import datetime, timezone
import json
from uuid import UUID

import pytest

from standup.entries import build_standup_entry, format_timestamp, resolve_display_name
from standup.models import StandupEntry


FIXED_NOW = datetime(2024, 1, 15, 9, 30, 5, 123000, tzinfo=timezone.utc)


def test_entry_is_built_from_fenced_model_output() -> None:
    model_text = "```json\n" + json.dumps(
        {
            "rawTranscript": "Yesterday I fixed the login bug, today I start the settings page.",
            "yesterday": ["I fixed the login bug"],
            "today": ["start the settings page"],
            "impediments": ["no blockers"],
        }
    ) + "\n```"

    entry = build_standup_entry(
        display_name="Ada",
        model_text=model_text,
        fallback_transcript="unused",
        now=FIXED_NOW,
    )

    UUID(entry.id)
    assert entry.date_iso == "2024-01-15"
    assert entry.created_at == "2024-01-15T09:30:05.123Z"
    assert entry.raw_transcript == "Yesterday I fixed the login bug, today I start the settings page."
    assert entry.sections.yesterday == ["Fixed the login bug"]
    assert entry.sections.today == ["Start the settings page"]
    assert entry.sections.impediments == ["None"]
    assert entry.markdown_file_name == "2024-01-15_yti.md"
    assert entry.markdown_content == f"# Daily Standup - 2024-01-15\n\n{entry.formatted_text.strip()}\n"
    assert entry.formatted_text.startswith("Ada\n\nY:\n\n* Fixed the login bug\n")


def test_unparseable_model_output_falls_back_to_transcript() -> None:
    entry = build_standup_entry(
        display_name="Ada",
        model_text="I cannot help with that request.",
        fallback_transcript="Fixed login bug",
        now=FIXED_NOW,
    )

    assert entry.raw_transcript == "Fixed login bug"
    assert entry.sections.today == ["Fixed login bug"]
    assert entry.sections.impediments == ["None"]


def test_wire_form_uses_record_field_names() -> None:
    entry = build_standup_entry(display_name="Ada", model_text="{}", fallback_transcript="", now=FIXED_NOW)
    wire = entry.to_wire()

    assert set(wire) == {
        "id",
        "dateISO",
        "displayName",
        "rawTranscript",
        "formattedText",
        "markdownContent",
        "markdownFileName",
        "sections",
        "createdAt",
    }
    assert set(wire["sections"]) == {"yesterday", "today", "impediments"}
    assert StandupEntry.model_validate(wire) == entry


def test_entries_are_immutable() -> None:
    entry = build_standup_entry(display_name="Ada", model_text="{}", fallback_transcript="", now=FIXED_NOW)

    with pytest.raises(Exception):
        entry.display_name = "Grace"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("candidate", "default_name", "expected"),
    [
        ("  Ada ", "Grace", "Ada"),
        ("", "Grace", "Grace"),
        (None, "  ", "Developer"),
        ("   ", None, "Developer"),
    ],
)
def test_resolve_display_name(candidate: str | None, default_name: str | None, expected: str) -> None:
    assert resolve_display_name(candidate, default_name) == expected


def test_format_timestamp_converts_to_utc() -> None:
    from datetime import timedelta

    offset = timezone(timedelta(hours=2))
    assert format_timestamp(datetime(2024, 1, 15, 1, 0, tzinfo=offset)) == "2024-01-14T23:00:00.000Z"
