from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


SectionName = Literal["yesterday", "today", "impediments"]
SECTION_NAMES: tuple[SectionName, ...] = ("yesterday", "today", "impediments")


class StandupSections(BaseModel):
    yesterday: list[str] = Field(default_factory=list)
    today: list[str] = Field(default_factory=list)
    impediments: list[str] = Field(default_factory=list)

    def get(self, section: SectionName) -> list[str]:
        return getattr(self, section)


@dataclass(frozen=True)
class ModelEnvelope:
    """Best-effort parse of a model response.

    A section of ``None`` means the model did not provide it, which is kept
    distinct from an empty list until normalization.
    """

    raw_transcript: str | None = None
    yesterday: list[str] | None = None
    today: list[str] | None = None
    impediments: list[str] | None = None

    def sections(self) -> dict[str, list[str]]:
        provided: dict[str, list[str]] = {}
        for name in SECTION_NAMES:
            value = getattr(self, name)
            if value is not None:
                provided[name] = value
        return provided

    @property
    def is_empty(self) -> bool:
        return self.raw_transcript is None and not self.sections()


class StandupEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    date_iso: str = Field(..., alias="dateISO", pattern=r"^\d{4}-\d{2}-\d{2}$")
    display_name: str = Field(..., alias="displayName", min_length=1)
    raw_transcript: str = Field(default="", alias="rawTranscript")
    formatted_text: str = Field(..., alias="formattedText")
    markdown_content: str = Field(..., alias="markdownContent")
    markdown_file_name: str = Field(..., alias="markdownFileName")
    sections: StandupSections
    created_at: str = Field(..., alias="createdAt")

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)
