#!/usr/bin/env python3
"""
List the collection with current positional indices.

Usage:
  python scripts/list_artworks.py [--search text] [--favourites]
"""
from __future__ import annotations

import argparse
import sys

from gallery.core.config import get_settings
from gallery.core.logging import init_logging
from gallery.domain.search import favourite_matches, title_matches
from gallery.repositories.json_storage import JsonArtworkStorage
from gallery.services.collection_service import ArtworkCollection


def main() -> None:
    ap = argparse.ArgumentParser(description="List artworks")
    ap.add_argument("--search", default="", help="Case-insensitive substring filter")
    ap.add_argument("--favourites", action="store_true", help="Only liked artworks (search also matches description)")
    args = ap.parse_args()

    init_logging("WARNING")
    collection = ArtworkCollection(JsonArtworkStorage(get_settings().data_file))
    predicate = favourite_matches(args.search) if args.favourites else title_matches(args.search)
    count = 0
    for index, item in collection.list(predicate):
        heart = "*" if item.liked else " "
        print(f"[{index:>3}] {heart} {item.title} ({item.date})")
        count += 1
    print(f"{count} of {len(collection)} artwork(s)")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
