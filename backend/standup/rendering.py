from __future__ import annotations

from standup.models import StandupSections


SECTION_HEADERS: tuple[tuple[str, str], ...] = (
    ("yesterday", "Y:"),
    ("today", "T:"),
    ("impediments", "I:"),
)
EMPTY_SECTION_BULLET = "* None"
MARKDOWN_FILE_SUFFIX = "_yti.md"


def to_bullets(items: list[str]) -> list[str]:
    if not items:
        return [EMPTY_SECTION_BULLET]
    return [f"* {item}" for item in items]


def format_standup(display_name: str, sections: StandupSections) -> str:
    lines: list[str] = [display_name.strip()]
    for section, header in SECTION_HEADERS:
        lines.extend(["", header, ""])
        lines.extend(to_bullets(sections.get(section)))
    return "\n".join(lines).strip() + "\n"


def to_markdown(date_iso: str, formatted_text: str) -> str:
    return f"# Daily Standup - {date_iso}\n\n{formatted_text.strip()}\n"


def markdown_file_name(date_iso: str) -> str:
    return f"{date_iso}{MARKDOWN_FILE_SUFFIX}"
