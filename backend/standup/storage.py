from __future__ import annotations

import json
import logging
import math
from pathlib import Path

from pydantic import ValidationError

from standup.config import Settings
from standup.models import StandupEntry

logger = logging.getLogger("standup.storage")


class StorageError(RuntimeError):
    """Raised when a standup artifact or the history file cannot be written."""


def clamp_history_limit(raw: object, *, default: int = 7, maximum: int = 50) -> int:
    if raw is None or isinstance(raw, bool):
        return default
    text = str(raw).strip()
    # A present but blank value counts as zero and clamps to the minimum.
    try:
        requested = float(text) if text else 0.0
    except ValueError:
        return default
    if not math.isfinite(requested):
        return default
    return int(min(max(requested, 1), maximum))


class HistoryStore:
    """Markdown artifacts on disk plus a newest-first JSON history.

    Assumes a single writer.
    """

    def __init__(self, *, markdown_dir: Path, history_path: Path, max_entries: int = 200) -> None:
        self.markdown_dir = Path(markdown_dir)
        self.history_path = Path(history_path)
        self.max_entries = max(1, max_entries)

    @classmethod
    def from_settings(cls, settings: Settings) -> "HistoryStore":
        return cls(
            markdown_dir=Path(settings.markdown_dir),
            history_path=settings.history_path,
            max_entries=settings.history_max_entries,
        )

    def ensure_paths(self) -> None:
        try:
            self.markdown_dir.mkdir(parents=True, exist_ok=True)
            self.history_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to create storage directories: {exc}") from exc

    def save_entry(self, entry: StandupEntry) -> Path:
        self.ensure_paths()
        markdown_path = self.markdown_dir / Path(entry.markdown_file_name).name
        try:
            markdown_path.write_text(entry.markdown_content, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to write markdown artifact '{markdown_path}': {exc}") from exc

        history = [entry, *self._read_all()][: self.max_entries]
        self._write_all(history)
        logger.info(
            "standup_entry_saved",
            extra={
                "event": "standup_entry_saved",
                "entry_id": entry.id,
                "markdown_path": str(markdown_path),
                "history_size": len(history),
            },
        )
        return markdown_path

    def recent(self, limit: int) -> list[StandupEntry]:
        return self._read_all()[: max(0, limit)]

    def _read_all(self) -> list[StandupEntry]:
        if not self.history_path.exists():
            return []
        try:
            parsed = json.loads(self.history_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning(
                "history_read_failed",
                extra={"event": "history_read_failed", "path": str(self.history_path), "error": str(exc)},
            )
            return []
        if not isinstance(parsed, list):
            logger.warning(
                "history_read_failed",
                extra={
                    "event": "history_read_failed",
                    "path": str(self.history_path),
                    "error": "history file is not a JSON array",
                },
            )
            return []

        entries: list[StandupEntry] = []
        skipped = 0
        for item in parsed:
            try:
                entries.append(StandupEntry.model_validate(item))
            except ValidationError:
                skipped += 1
        if skipped:
            logger.warning(
                "history_records_skipped",
                extra={"event": "history_records_skipped", "path": str(self.history_path), "skipped": skipped},
            )
        return entries

    def _write_all(self, entries: list[StandupEntry]) -> None:
        payload = [entry.to_wire() for entry in entries]
        try:
            self.history_path.write_text(f"{json.dumps(payload, indent=2, ensure_ascii=False)}\n", encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to write history file '{self.history_path}': {exc}") from exc
