"""Storage for uploaded artwork images."""

from __future__ import annotations

import os
import re
import secrets
import time
from pathlib import Path
from typing import Protocol

from loguru import logger

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class AssetStore(Protocol):
    def store(self, data: bytes, suggested_name: str) -> str: ...

    def delete(self, ref: str) -> bool: ...


def safe_filename(name: str | None) -> str:
    """Reduce an uploaded file name to its basename made of [A-Za-z0-9._-]."""
    base = re.split(r"[\\/]", name or "")[-1]
    cleaned = _UNSAFE_CHARS.sub("", base).lstrip(".")
    return cleaned or "upload"


class UploadAssetStore:
    """Keeps image bytes as files inside ``uploads_dir``; records hold only the file name."""

    def __init__(self, uploads_dir: str | os.PathLike) -> None:
        self.uploads_dir = Path(uploads_dir)
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def new_ref(self, suggested_name: str | None) -> str:
        stamp = int(time.time() * 1000)
        return f"{stamp}-{secrets.randbelow(10**9)}-{safe_filename(suggested_name)}"

    def path_for(self, ref: str) -> Path | None:
        """Return the file backing ``ref``, or None when it would leave the uploads dir."""
        if not ref or safe_filename(ref) != ref:
            return None
        return self.uploads_dir / ref

    def store(self, data: bytes, suggested_name: str) -> str:
        ref = self.new_ref(suggested_name)
        dest = self.uploads_dir / ref
        with open(dest, "xb") as f:
            f.write(data)
        logger.info("Stored asset {} ({} bytes)", ref, len(data))
        return ref

    def delete(self, ref: str) -> bool:
        """Remove the asset; returns False when it is already absent."""
        path = self.path_for(ref)
        if path is None:
            logger.warning("Refusing to delete asset outside uploads dir: {!r}", ref)
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Deleted asset {}", ref)
        return True
