from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any, Iterable, Mapping

from standup.envelope import coerce_text
from standup.models import SECTION_NAMES, ModelEnvelope, SectionName, StandupSections


NO_IMPEDIMENTS = "None"

FILLER_WORDS = ("basically", "just", "like", "um", "uh", "so yeah")
ACRONYMS = ("ui", "pr", "api", "qa", "sdk", "ios", "android", "db", "sql", "ci", "cd")

WHITESPACE_PATTERN = re.compile(r"\s+")
FILLER_PATTERNS = tuple(
    re.compile(rf"\b{re.escape(word)}\b", flags=re.IGNORECASE) for word in FILLER_WORDS
)
ACRONYM_PATTERNS = tuple(
    (re.compile(rf"\b{acronym}\b", flags=re.IGNORECASE), acronym.upper()) for acronym in ACRONYMS
)

# First match wins; the bare pronoun only applies when no auxiliary follows it.
LEADING_SUBJECT_PATTERNS = (
    re.compile(r"^(?:i|we)\s+(?:was|were|am|are|have|had|did|currently|will)\s+", flags=re.IGNORECASE),
    re.compile(r"^(?:i|we)\s+", flags=re.IGNORECASE),
)


@dataclass(frozen=True)
class ReplacementRule:
    """Replaces the whole bullet when ``pattern`` is found in it."""

    pattern: re.Pattern[str]
    replacement: str
    sections: frozenset[str] | None = None

    def applies(self, text: str, section: str) -> bool:
        if self.sections is not None and section not in self.sections:
            return False
        return self.pattern.search(text) is not None


REPLACEMENT_RULES = (
    ReplacementRule(
        pattern=re.compile(
            r"\b(?:no impediments|no blockers|none|nothing blocking|not blocked)\b",
            flags=re.IGNORECASE,
        ),
        replacement=NO_IMPEDIMENTS,
        sections=frozenset({"impediments"}),
    ),
    ReplacementRule(
        pattern=re.compile(r"\b(?:worked|working) on (?:the )?ui\b", flags=re.IGNORECASE),
        replacement="Refactored UI",
    ),
)

PREFIX_REWRITES = (
    ("working on ", "Advance "),
    ("helping with ", "Assist with "),
)


def collapse_whitespace(value: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", value).strip()


def remove_fillers(value: str) -> str:
    cleaned = value
    for pattern in FILLER_PATTERNS:
        cleaned = pattern.sub(" ", cleaned)
    return collapse_whitespace(cleaned)


def strip_leading_subject(value: str) -> str:
    for pattern in LEADING_SUBJECT_PATTERNS:
        if pattern.match(value):
            return collapse_whitespace(pattern.sub("", value, count=1))
    return value


def rewrite_prefix(value: str) -> str:
    lowered = value.lower()
    for prefix, replacement in PREFIX_REWRITES:
        if lowered.startswith(prefix):
            return f"{replacement}{value[len(prefix):].strip()}"
    return value


def sentence_case(value: str) -> str:
    clean = value.strip()
    if not clean:
        return clean
    return clean[0].upper() + clean[1:]


def normalize_acronyms(value: str) -> str:
    normalized = value
    for pattern, replacement in ACRONYM_PATTERNS:
        normalized = pattern.sub(replacement, normalized)
    return normalized


def normalize_bullet(value: Any, section: SectionName) -> str | None:
    """Clean one bullet into canonical form, or return None when nothing is left."""
    text = collapse_whitespace(coerce_text(value))
    if not text:
        return None

    text = strip_leading_subject(remove_fillers(text))
    if not text:
        return None

    for rule in REPLACEMENT_RULES:
        if rule.applies(text, section):
            return rule.replacement

    text = rewrite_prefix(text)
    return normalize_acronyms(sentence_case(text))


def dedupe(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        key = item.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result


def _section_candidates(source: Any, section: SectionName) -> list[Any]:
    if isinstance(source, (ModelEnvelope, StandupSections)):
        value = getattr(source, section)
    elif isinstance(source, Mapping):
        value = source.get(section)
    else:
        value = None
    if not isinstance(value, (list, tuple)):
        return []
    return list(value)


def normalize_sections(
    source: ModelEnvelope | StandupSections | Mapping[str, Any] | None,
    raw_transcript: str | None,
) -> StandupSections:
    result: dict[str, list[str]] = {}
    for section in SECTION_NAMES:
        cleaned: list[str] = []
        for candidate in _section_candidates(source, section):
            bullet = normalize_bullet(candidate, section)
            if bullet:
                cleaned.append(bullet)
        result[section] = dedupe(cleaned)

    transcript = raw_transcript if isinstance(raw_transcript, str) else ""
    if not result["yesterday"] and not result["today"] and transcript.strip():
        fallback = normalize_bullet(transcript, "today")
        if fallback:
            result["today"].append(fallback)

    if not result["impediments"]:
        result["impediments"] = [NO_IMPEDIMENTS]

    return StandupSections(**result)
