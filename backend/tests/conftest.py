from __future__ import annotations

from pathlib import Path

import pytest

from standup.config import settings


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(settings, "data_dir", str(tmp_path / "data"))
    monkeypatch.setattr(settings, "markdown_dir", str(tmp_path / "ytis"))
    monkeypatch.setattr(settings, "gemini_api_key", "")
    monkeypatch.setattr(settings, "default_standup_name", "")
    return tmp_path
