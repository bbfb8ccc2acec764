"""HTTP controllers for web API endpoints."""

from splitswap.web.controllers.routes import router as routes_router

__all__ = [
    "routes_router",
]
