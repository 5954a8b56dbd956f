# 📄 File: substore/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main control center that starts the subscription service, loads the saved subscription
# from storage, and makes it available to the app's screens over HTTP.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point. The lifespan configures logging, builds the
# configured key/value backend, creates and loads the SubscriptionStore, and closes storage on
# shutdown. Domain exceptions are rendered as JSON error bodies.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn
# - substore.shared.config.settings
# - substore.shared.infrastructure.storage
# - substore.modules.subscription (store service, event handlers)
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup
# - Development server commands
# - Tests (TestClient over create_application)

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from substore.api.middleware.logging import RequestLoggingMiddleware
from substore.api.v1.router import api_v1_router
from substore.modules.subscription.domain.events.handlers import SubscriptionAuditHandler
from substore.modules.subscription.domain.services.subscription_store import SubscriptionStore
from substore.shared.config.settings import Settings, get_settings
from substore.shared.core.exceptions import SubstoreException
from substore.shared.infrastructure.storage import KeyValueStore, create_key_value_store
from substore.shared.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStore] = None,
    store_options: Optional[Dict[str, Any]] = None,
) -> FastAPI:
    """
    Application factory function.

    Args:
        settings: Settings to use, defaults to the cached application settings
        storage: Key/value backend to use instead of the configured one; not closed on shutdown
        store_options: Extra SubscriptionStore arguments (clock, sleep, ...)

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or get_settings()
    store_options = dict(store_options or {})

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan context manager.

        Loads the subscription before the first request is served; a failed
        load leaves the store degraded but the service still starts.
        """
        setup_logging()
        logger.info(f"{settings.APP_NAME} starting up...", environment=settings.ENVIRONMENT)

        owns_storage = storage is None
        backend = create_key_value_store(settings) if owns_storage else storage

        store = SubscriptionStore.from_settings(backend, settings, **store_options)
        store.subscribe(SubscriptionAuditHandler())
        await store.load()
        app.state.subscription_store = store
        logger.info("Subscription store ready", state=store.state.value)

        try:
            yield  # Application is running
        finally:
            logger.info(f"{settings.APP_NAME} shutting down...")
            app.state.subscription_store = None

            if owns_storage:
                try:
                    await backend.close()
                    logger.info("Storage connections closed")
                except Exception as e:
                    logger.error(f"Shutdown error: {e}", exc_info=True)

    # Create FastAPI application
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )
    app.state.subscription_store = None

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    if not settings.is_testing:
        app.add_middleware(RequestLoggingMiddleware)

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(
        api_v1_router,
        prefix="/api/v1",
    )

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(SubstoreException)
    async def substore_exception_handler(
        request: Request,
        exc: SubstoreException
    ) -> JSONResponse:
        """Handle subscription store domain exceptions."""
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code}: {exc.message}", error_code=exc.error_code)
        else:
            logger.info(f"{exc.error_code}: {exc.message}", error_code=exc.error_code)

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": exc.error_code,
                    "message": exc.message,
                    "details": exc.details,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                    "request_id": getattr(request.state, "request_id", None),
                }
            },
        )

    @app.exception_handler(500)
    async def internal_server_error_handler(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle 500 Internal Server Error."""
        logger.error(f"Internal server error: {exc}", exc_info=True)

        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": "An internal server error occurred",
                    "details": {"error_type": type(exc).__name__} if settings.DEBUG else {},
                    "request_id": getattr(request.state, "request_id", None),
                }
            },
        )

    # =========================================================================
    # ROOT ENDPOINTS
    # =========================================================================

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "description": settings.APP_DESCRIPTION,
            "docs_url": "/docs" if settings.DEBUG else None,
            "health_check": "/api/v1/health",
            "api_base": "/api/v1",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        """Favicon endpoint to prevent 404 errors."""
        return Response(status_code=204)

    return app


# Create the FastAPI application
app = create_application()


def main():
    """
    Main function for running the application in development.

    Used when running ``python -m substore.main`` or the ``substore`` script.
    """
    settings = get_settings()
    uvicorn.run(
        "substore.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
