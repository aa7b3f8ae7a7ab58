"""Substring filters used by the home and favourites listings."""
from __future__ import annotations

from typing import Callable

from gallery.domain.artwork import Artwork

ArtworkPredicate = Callable[[Artwork], bool]


def _needle(query: str | None) -> str:
    return (query or "").lower()


def title_matches(query: str | None) -> ArtworkPredicate:
    """Case-insensitive containment on the title. Empty query matches everything."""
    needle = _needle(query)

    def predicate(artwork: Artwork) -> bool:
        return needle in artwork.title.lower()

    return predicate


def favourite_matches(query: str | None) -> ArtworkPredicate:
    """Liked records whose title or description contains the query."""
    needle = _needle(query)

    def predicate(artwork: Artwork) -> bool:
        if not artwork.liked:
            return False
        return needle in artwork.title.lower() or needle in artwork.description.lower()

    return predicate
