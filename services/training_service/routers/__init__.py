"""Training service routers."""

from services.training_service.routers.internal import router as internal_router
from services.training_service.routers.reports import router as reports_router

__all__ = [
    "internal_router",
    "reports_router",
]
