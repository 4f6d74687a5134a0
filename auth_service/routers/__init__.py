"""API routers."""

from auth_service.routers.auth import build_auth_router

__all__ = ["build_auth_router"]
