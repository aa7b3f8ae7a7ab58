"""Entry point for uvicorn/gunicorn: ``uvicorn gallery.app_factory:create_app --factory``."""
from gallery.app import create_app

__all__ = ["create_app"]
