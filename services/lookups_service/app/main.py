"""FastAPI application for the Lookups Service."""

from fastapi import FastAPI
from libs.common.logging import configure_logging
from services.lookups_service.routers import lookups_router


def create_app() -> FastAPI:
    """Create and configure the Lookups Service FastAPI app."""
    configure_logging()
    app = FastAPI(
        title="Lookups Service",
        version="0.1.0",
        description="Tenant-aware classification lists (global defaults, overrides, custom values).",
    )

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "lookups"}

    app.include_router(lookups_router)

    return app


app = create_app()
