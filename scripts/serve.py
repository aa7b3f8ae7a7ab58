#!/usr/bin/env python3
"""
Run the gallery web app with uvicorn.

Usage:
  python scripts/serve.py [--host 127.0.0.1] [--port 3000] [--reload]
"""
from __future__ import annotations

import argparse

import uvicorn
from loguru import logger

from gallery.core.config import get_settings


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Serve the artwork gallery")
    ap.add_argument("--host", default=settings.host)
    ap.add_argument("--port", type=int, default=settings.port)
    ap.add_argument("--reload", action="store_true", help="Reload on code changes (dev)")
    args = ap.parse_args()

    logger.info("SERVER: http://{}:{}", args.host, args.port)
    uvicorn.run("gallery.app_factory:create_app", factory=True, host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
