"""Health check endpoints."""

from fastapi import APIRouter, Request

from bridgex import __version__
from bridgex.config import get_settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "bridgex"}


@router.get("/health/detailed")
async def detailed_health(request: Request):
    """Detailed health check with quote cycle status and configuration."""
    settings = get_settings()
    controller = request.app.state.store.state.controller
    loading_status = controller.quotes_loading_status
    return {
        "status": "degraded" if controller.quote_fetch_error else "healthy",
        "service": "bridgex",
        "version": __version__,
        "quotes": {
            "count": len(controller.quotes),
            "loading_status": loading_status.value if loading_status else None,
            "last_fetched_ms": controller.quotes_last_fetched_ms,
            "refresh_count": controller.quotes_refresh_count,
            "fetch_error": controller.quote_fetch_error,
            "refreshing": request.app.state.refresh_controller is not None,
        },
        "config": settings.get_safe_dict(),
    }
