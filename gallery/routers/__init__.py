"""
FastAPI routers.

Each module exposes an APIRouter included by gallery.app.create_app.
"""
