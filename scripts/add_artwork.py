#!/usr/bin/env python3
"""
Add an artwork directly to the JSON collection.

Usage:
  python scripts/add_artwork.py --title "Starry Night" --date 1889 --description "Oil on canvas" [--image path/to/file.jpg]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from gallery.core.config import get_settings
from gallery.core.logging import init_logging
from gallery.domain.artwork import CollectionError, ValidationError, validate_fields
from gallery.repositories.json_storage import JsonArtworkStorage
from gallery.services.asset_service import UploadAssetStore
from gallery.services.collection_service import ArtworkCollection


def add_artwork(
    collection: ArtworkCollection,
    assets: UploadAssetStore,
    title: str,
    date: str,
    description: str,
    image: str | None = None,
) -> tuple[int, str | None]:
    """Validate, copy the image into uploads, then create; the image is removed again on failure."""
    validate_fields(title, date, description)
    ref = None
    if image:
        src = Path(image)
        if not src.is_file():
            raise SystemExit(f"Image '{src}' not found")
        ref = assets.store(src.read_bytes(), src.name)
    try:
        index = collection.create(title, date, description, ref)
    except CollectionError:
        if ref:
            assets.delete(ref)
        raise
    return index, ref


def main() -> None:
    ap = argparse.ArgumentParser(description="Add an artwork to the collection")
    ap.add_argument("--title", required=True, help="Artwork title")
    ap.add_argument("--date", required=True, help="Free-form date (e.g. 1889, c. 1500)")
    ap.add_argument("--description", required=True, help="Short description")
    ap.add_argument("--image", help="Image file to copy into the uploads directory")
    args = ap.parse_args()

    settings = get_settings()
    init_logging("WARNING")
    assets = UploadAssetStore(settings.uploads_dir)
    collection = ArtworkCollection(JsonArtworkStorage(settings.data_file), assets)

    try:
        index, ref = add_artwork(collection, assets, args.title, args.date, args.description, args.image)
    except ValidationError as exc:
        raise SystemExit(f"Missing fields: {', '.join(exc.missing)}")
    print("OK: artwork added")
    print(f"  Index: {index}")
    print(f"  Title: {args.title.strip()}")
    if ref:
        print(f"  Image: {ref}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
