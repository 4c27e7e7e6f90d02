"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bridgex import __version__
from bridgex.config import get_settings
from bridgex.refresh.controller import QuoteFetcher, RefreshController
from bridgex.state.store import BridgeStore
from bridgex.web.services.bridge_service import BridgeQuoteService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    fetcher = app.state.quote_fetcher
    if fetcher is not None:
        controller = RefreshController(app.state.store, fetcher, get_settings())
        controller.start()
        app.state.refresh_controller = controller
        logger.info("Quote refresh started")
    else:
        logger.warning("No quote fetcher configured - form changes will not fetch quotes")
    yield
    # Shutdown
    if app.state.refresh_controller is not None:
        app.state.refresh_controller.stop()
        app.state.refresh_controller = None
        logger.info("Quote refresh stopped")


def create_app(
    store: Optional[BridgeStore] = None,
    fetcher: Optional[QuoteFetcher] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        store: Bridge state store to serve; a fresh one built from settings by default
        fetcher: Quote fetcher that receives debounced request changes while the
            app runs. It writes fetched quotes back through the store.
    """
    settings = get_settings()

    app = FastAPI(
        title="Bridgex API",
        description="Cross-chain bridge quote ranking and validation API",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if store is None:
        store = BridgeStore.from_settings(settings)
    app.state.store = store
    app.state.quote_fetcher = fetcher
    app.state.refresh_controller = None
    app.state.bridge_service = BridgeQuoteService(store, settings)

    # Register routes
    from bridgex.api.routes import health
    from bridgex.web.controllers import bridge_router

    app.include_router(health.router, tags=["Health"])
    app.include_router(bridge_router, prefix="/api/v1", tags=["Bridge"])

    logger.debug(f"Created app for environment {settings.environment}")
    return app


# Default app instance
app = create_app()
