"""API routes package."""

from server.routes.download_routes import router as download_router
from server.routes.ping_routes import router as ping_router
from server.routes.upload_routes import router as upload_router

__all__ = ["download_router", "ping_router", "upload_router"]
