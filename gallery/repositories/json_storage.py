"""
JSON file persistence for the artwork collection.

The whole collection is one pretty-printed JSON array, rewritten in full on
every save.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable
import json
import os

from loguru import logger

from gallery.domain.artwork import Artwork


class JsonArtworkStorage:
    """Loads and saves the collection document at ``path``."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def load(self) -> list[Artwork]:
        """Read the document; a missing or malformed file yields an empty list."""
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Could not read {}: {}; starting with an empty collection", self.path, exc)
            return []
        if not isinstance(payload, list):
            logger.warning("{} does not hold a JSON array; starting with an empty collection", self.path)
            return []
        try:
            return [Artwork.from_dict(entry) for entry in payload]
        except ValueError as exc:
            logger.warning("Invalid artwork entry in {}: {}; starting with an empty collection", self.path, exc)
            return []

    def save(self, records: Iterable[Artwork]) -> None:
        """Overwrite the document with ``records``. OSError propagates."""
        payload = json.dumps([record.to_dict() for record in records], ensure_ascii=False, indent=2)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            tmp_path.replace(self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
