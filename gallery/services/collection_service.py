"""
The artwork collection: an ordered list of records addressed by position.

A record's position is its identity. Deleting a record shifts every later
position down by one, so callers must re-list after any mutation instead of
holding on to indices.

Every mutation runs under one lock: the new list is built, saved, and only
then swapped in. The list is never changed in place, which lets readers
work on a snapshot without taking the lock.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any, Iterator, Optional, Sequence

from loguru import logger

from gallery.domain.artwork import (
    Artwork,
    NotFoundError,
    StorageError,
    coerce_index,
    validate_fields,
)
from gallery.domain.search import ArtworkPredicate
from gallery.repositories.json_storage import JsonArtworkStorage
from gallery.services.asset_service import AssetStore


class ArtworkListing:
    """Restartable iterable of ``(index, artwork)`` pairs over one snapshot."""

    def __init__(self, records: Sequence[Artwork], predicate: Optional[ArtworkPredicate] = None) -> None:
        self._records = records
        self._predicate = predicate

    def __iter__(self) -> Iterator[tuple[int, Artwork]]:
        for index, record in enumerate(self._records):
            if self._predicate is None or self._predicate(record):
                yield index, record


class ArtworkCollection:
    """CRUD over the in-memory collection, persisted after every mutation."""

    def __init__(self, storage: JsonArtworkStorage, assets: AssetStore | None = None) -> None:
        self.storage = storage
        self.assets = assets
        self._lock = threading.Lock()
        self._records: tuple[Artwork, ...] = tuple(storage.load())
        logger.info("Loaded {} artworks from {}", len(self._records), storage.path)

    def __len__(self) -> int:
        return len(self._records)

    def _position(self, records: Sequence[Artwork], index: Any) -> int | None:
        position = coerce_index(index)
        if position is None or not 0 <= position < len(records):
            return None
        return position

    def _require(self, records: Sequence[Artwork], index: Any) -> int:
        position = self._position(records, index)
        if position is None:
            raise NotFoundError(index)
        return position

    def _commit(self, records: tuple[Artwork, ...]) -> None:
        # Caller holds the lock.
        try:
            self.storage.save(records)
        except OSError as exc:
            logger.error("Saving {} failed: {}", self.storage.path, exc)
            raise StorageError(f"Could not save the collection: {exc}") from exc
        self._records = records

    def create(self, title: str, date: str, description: str, image: str | None = None) -> int:
        title, date, description = validate_fields(title, date, description)
        record = Artwork(title=title, date=date, description=description, image=image or None)
        with self._lock:
            records = self._records + (record,)
            self._commit(records)
            index = len(records) - 1
        logger.info("Created artwork {} ({!r})", index, title)
        return index

    def list(self, predicate: Optional[ArtworkPredicate] = None) -> ArtworkListing:
        return ArtworkListing(self._records, predicate)

    def get(self, index: Any) -> Artwork:
        records = self._records
        return records[self._require(records, index)]

    def update(self, index: Any, title: str, date: str, description: str) -> Artwork:
        """Replace the text fields; image and liked are kept."""
        with self._lock:
            records = list(self._records)
            position = self._require(records, index)
            title, date, description = validate_fields(title, date, description)
            updated = replace(records[position], title=title, date=date, description=description)
            records[position] = updated
            self._commit(tuple(records))
        logger.info("Updated artwork {}", position)
        return updated

    def delete(self, index: Any) -> None:
        with self._lock:
            records = list(self._records)
            position = self._require(records, index)
            removed = records.pop(position)
            self._commit(tuple(records))
            logger.info("Deleted artwork {} ({!r})", position, removed.title)
            if removed.image:
                self._discard_asset(removed.image)

    def toggle_like(self, index: Any) -> Artwork | None:
        """Flip ``liked``; an invalid index is ignored and returns None."""
        with self._lock:
            records = list(self._records)
            position = self._position(records, index)
            if position is None:
                logger.debug("Ignoring like toggle for unknown artwork {!r}", index)
                return None
            toggled = replace(records[position], liked=not records[position].liked)
            records[position] = toggled
            self._commit(tuple(records))
        return toggled

    def _discard_asset(self, ref: str) -> None:
        if self.assets is None:
            return
        try:
            if not self.assets.delete(ref):
                logger.warning("Asset {} was already gone", ref)
        except OSError as exc:
            logger.warning("Could not delete asset {}: {}", ref, exc)
