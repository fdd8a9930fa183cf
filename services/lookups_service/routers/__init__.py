"""Lookups service routers."""

from services.lookups_service.routers.lookups import router as lookups_router

__all__ = ["lookups_router"]
