"""API routes package."""

from gateway.routes.legacy_routes import router as legacy_router
from gateway.routes.transfer_routes import router as transfer_router

__all__ = ["legacy_router", "transfer_router"]
