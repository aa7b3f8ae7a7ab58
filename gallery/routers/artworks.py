from __future__ import annotations

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool

from gallery.domain.artwork import NotFoundError, StorageError, ValidationError, validate_fields
from gallery.domain.search import favourite_matches, title_matches
from gallery.services.asset_service import UploadAssetStore
from gallery.services.collection_service import ArtworkCollection

router = APIRouter(prefix="", tags=["artworks"])

REQUIRED_MESSAGE = "All fields are required (except image)."


def _get_collection(request: Request) -> ArtworkCollection:
    collection = getattr(getattr(request.app, "state", None), "collection", None)
    if collection is None:
        raise RuntimeError("ArtworkCollection not configured")
    return collection


def _get_assets(request: Request) -> UploadAssetStore:
    assets = getattr(getattr(request.app, "state", None), "assets", None)
    if assets is None:
        raise RuntimeError("Asset store not configured")
    return assets


def _templates(request: Request) -> Jinja2Templates:
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


def _render(request: Request, name: str, context: dict, status_code: int = 200) -> HTMLResponse:
    context = {"css_href": getattr(request.app.state, "css_href", "/static/style.css"), **context}
    return _templates(request).TemplateResponse(request, name, context, status_code=status_code)


def _local_path(value: str | None, default: str = "/") -> str:
    target = (value or "").strip()
    if target.startswith("/") and not target.startswith("//") and "\\" not in target:
        return target
    return default


async def _read_upload(request: Request, image: UploadFile | None) -> bytes | None:
    """Return the uploaded bytes, None for an empty file part, or raise HTTPException(400)."""
    if image is None or not image.filename:
        return None
    ct = (image.content_type or "").lower()
    if not ct.startswith("image/"):
        raise HTTPException(400, "Unsupported file type (images only).")
    data = await image.read()
    if not data:
        return None
    limit = request.app.state.settings.max_upload_bytes
    if len(data) > limit:
        raise HTTPException(400, f"Image exceeds {limit} bytes.")
    return data


@router.get("/", response_class=HTMLResponse)
def home(request: Request, search: str = ""):
    collection = _get_collection(request)
    items = list(collection.list(title_matches(search)))
    return _render(request, "index.html", {"items": items, "search": search})


@router.get("/favourites", response_class=HTMLResponse)
def favourites(request: Request, search: str = ""):
    collection = _get_collection(request)
    items = list(collection.list(favourite_matches(search)))
    return _render(request, "favourites.html", {"items": items, "search": search})


@router.get("/addArtwork", response_class=HTMLResponse)
def add_artwork_form(request: Request):
    return _render(request, "add.html", {})


@router.post("/addArtwork")
async def add_artwork(
    request: Request,
    title: str = Form(""),
    date: str = Form(""),
    description: str = Form(""),
    image: UploadFile | None = File(None),
):
    try:
        validate_fields(title, date, description)
    except ValidationError:
        return HTMLResponse(REQUIRED_MESSAGE, status_code=400)
    data = await _read_upload(request, image)
    assets = _get_assets(request)
    ref = assets.store(data, image.filename) if data is not None else None
    collection = _get_collection(request)
    try:
        await run_in_threadpool(collection.create, title, date, description, ref)
    except StorageError as exc:
        if ref:
            assets.delete(ref)
        raise HTTPException(500, str(exc)) from exc
    return RedirectResponse("/", status_code=303)


@router.get("/updateArtwork/{index}", response_class=HTMLResponse)
def update_artwork_form(index: str, request: Request):
    collection = _get_collection(request)
    try:
        item = collection.get(index)
    except NotFoundError:
        raise HTTPException(404, "Artwork not found")
    return _render(request, "update.html", {"id": index, "item": item})


@router.post("/updateArtwork/{index}")
def update_artwork(
    index: str,
    request: Request,
    title: str = Form(""),
    date: str = Form(""),
    description: str = Form(""),
):
    collection = _get_collection(request)
    try:
        collection.update(index, title, date, description)
    except NotFoundError:
        raise HTTPException(404, "Artwork not found")
    except ValidationError:
        return HTMLResponse(REQUIRED_MESSAGE, status_code=400)
    except StorageError as exc:
        raise HTTPException(500, str(exc)) from exc
    return RedirectResponse("/", status_code=303)


@router.post("/deleteArtwork/{index}")
def delete_artwork(index: str, request: Request):
    collection = _get_collection(request)
    try:
        collection.delete(index)
    except NotFoundError:
        raise HTTPException(404, "Artwork not found")
    except StorageError as exc:
        raise HTTPException(500, str(exc)) from exc
    return RedirectResponse("/", status_code=303)


@router.post("/toggleLike/{index}")
def toggle_like(index: str, request: Request, next_url: str = Form("/", alias="next")):
    collection = _get_collection(request)
    try:
        collection.toggle_like(index)
    except StorageError as exc:
        raise HTTPException(500, str(exc)) from exc
    return RedirectResponse(_local_path(next_url), status_code=303)
