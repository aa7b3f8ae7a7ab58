import hashlib
import os
import pathlib

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from gallery.core.config import Settings, get_settings
from gallery.core.logging import init_logging
from gallery.repositories.json_storage import JsonArtworkStorage
from gallery.routers import artworks as artworks_router
from gallery.services.asset_service import UploadAssetStore
from gallery.services.collection_service import ArtworkCollection

BASE = os.path.dirname(__file__)
WEB = os.path.join(BASE, "..", "web")
TEMPLATES = os.path.join(BASE, "..", "templates")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; "
            "img-src 'self' data:; "
            "style-src 'self' https://cdn.jsdelivr.net; "
            "font-src 'self' https://cdn.jsdelivr.net; "
            "script-src 'self' https://cdn.jsdelivr.net",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class CachedStaticFiles(StaticFiles):
    def set_headers(self, scope, resp, path, stat_result):
        # Stylesheet URLs carry a content hash
        resp.headers["Cache-Control"] = "public, max-age=31536000, immutable"


def _fingerprint_asset(rel_path: str) -> str:
    """
    Return the /static href for ``rel_path`` with a short content hash:
    "style.css" -> "/static/style.css?v=<hash8>".
    """
    src = pathlib.Path(WEB) / rel_path
    href = "/static/" + rel_path.replace("\\", "/")
    if not src.exists():
        return href
    h = hashlib.sha1(src.read_bytes()).hexdigest()[:8]
    return f"{href}?v={h}"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the gallery app; compatible with ``uvicorn --factory``."""
    settings = settings or get_settings()
    init_logging(settings.log_level, settings.log_dir or None)

    app = FastAPI(title="Artwork Gallery")

    assets = UploadAssetStore(settings.uploads_dir)
    storage = JsonArtworkStorage(settings.data_file)
    app.state.settings = settings
    app.state.assets = assets
    app.state.collection = ArtworkCollection(storage, assets)
    app.state.templates = Jinja2Templates(directory=TEMPLATES)
    app.state.css_href = _fingerprint_asset("style.css")

    app.mount("/static", CachedStaticFiles(directory=WEB), name="static")
    app.mount("/uploads", StaticFiles(directory=str(assets.uploads_dir)), name="uploads")
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.include_router(artworks_router.router)

    logger.info("Gallery ready: data={} uploads={}", storage.path, assets.uploads_dir)
    return app
