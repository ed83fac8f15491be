from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TextStandupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str | None = None
    display_name: str | None = Field(default=None, alias="displayName", max_length=160)
