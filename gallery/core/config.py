"""
Configuration helpers for the gallery backend.

Settings are read from environment variables once and cached; tests call
``get_settings.cache_clear()`` after changing the environment.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

ROOT = Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_file: str
    uploads_dir: str
    max_upload_bytes: int
    log_level: str
    log_dir: str
    host: str
    port: int


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_file=os.getenv("DATA_FILE") or str(ROOT / "data.json"),
        uploads_dir=os.getenv("UPLOADS_DIR") or str(ROOT / "web" / "uploads"),
        max_upload_bytes=_int(os.getenv("MAX_UPLOAD_BYTES"), 5 * 1024 * 1024),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_dir=os.getenv("LOG_DIR", ""),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_int(os.getenv("PORT"), 3000),
    )
