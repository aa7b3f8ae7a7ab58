"""Artwork record, field validation and positional index helpers."""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional

REQUIRED_FIELDS = ("title", "date", "description")
_INDEX_PATTERN = re.compile(r"[0-9]+")


class CollectionError(Exception):
    """Base exception for the artwork collection."""


class ValidationError(CollectionError):
    """Raised when a required text field is missing or empty."""

    def __init__(self, missing: list[str]):
        super().__init__("All fields are required (except image).")
        self.missing = missing


class NotFoundError(CollectionError):
    """Raised when a positional index does not address a record."""

    def __init__(self, index: Any):
        super().__init__(f"Artwork {index!r} not found")
        self.index = index


class StorageError(CollectionError):
    """Raised when the collection could not be written to disk."""


@dataclass(frozen=True)
class Artwork:
    title: str
    date: str
    description: str
    image: Optional[str] = None
    liked: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Artwork":
        """Build a record from its persisted form, raising ValueError on bad shape."""
        if not isinstance(data, Mapping):
            raise ValueError("artwork entry must be an object")
        values = {}
        for name in REQUIRED_FIELDS:
            value = data.get(name)
            if not isinstance(value, str):
                raise ValueError(f"artwork field {name!r} must be a string")
            values[name] = value
        if not values["title"].strip():
            raise ValueError("artwork field 'title' must not be empty")
        image = data.get("image")
        if image is not None and not isinstance(image, str):
            raise ValueError("artwork field 'image' must be a string or null")
        liked = data.get("liked", False)
        if not isinstance(liked, bool):
            raise ValueError("artwork field 'liked' must be a boolean")
        return cls(image=image or None, liked=liked, **values)


def validate_fields(title: str | None, date: str | None, description: str | None) -> tuple[str, str, str]:
    """Return the stripped text fields or raise ValidationError listing the empty ones."""
    cleaned = tuple((value or "").strip() for value in (title, date, description))
    missing = [name for name, value in zip(REQUIRED_FIELDS, cleaned) if not value]
    if missing:
        raise ValidationError(missing)
    return cleaned  # type: ignore[return-value]


def coerce_index(value: Any) -> int | None:
    """
    Convert a caller supplied position into an int.

    Ints and digit-only strings (path parameters) are accepted. Booleans,
    floats and anything else yield None. Bounds are not checked here.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _INDEX_PATTERN.fullmatch(text):
            return int(text)
    return None
