"""FastAPI application for the Training Service."""

from fastapi import FastAPI
from libs.common.logging import configure_logging
from services.training_service.routers import internal_router, reports_router


def create_app() -> FastAPI:
    """Create and configure the Training Service FastAPI app."""
    configure_logging()
    app = FastAPI(
        title="Training Service",
        version="0.1.0",
        description="Compliance, overdue, completion and skills matrix reporting.",
    )

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "training"}

    # Domain routers (all prefixed /training)
    app.include_router(reports_router, prefix="/training")
    app.include_router(internal_router, prefix="/training")

    return app


app = create_app()
