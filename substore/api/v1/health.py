# 📄 File: substore/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# Lets load balancers and monitoring ask "is the service up, and has it finished loading the
# subscription?"
# 🧪 Purpose (Technical Summary):
# Liveness and readiness endpoints. Readiness reflects the SubscriptionStore load phase: ready
# once load() has finished (including a degraded fallback), 503 before that.
# 🔗 Dependencies:
# FastAPI, substore.shared.config.settings
# 🔄 Connected Modules / Calls From:
# substore.api.v1.router, monitoring systems

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from substore.shared.config.settings import get_settings
from substore.shared.utils.logging import get_logger

logger = get_logger(__name__)

# Create router for health endpoints
health_router = APIRouter()


@health_router.get("/health",
                   summary="Basic Health Check",
                   description="Basic health check endpoint for load balancers and monitoring")
async def health_check() -> JSONResponse:
    """
    Basic health check endpoint

    Returns a simple OK status without touching storage.
    """
    settings = get_settings()
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }
    )


@health_router.get("/health/ready",
                   summary="Readiness Probe",
                   description="Ready once the subscription store has finished loading")
async def readiness_probe(request: Request) -> JSONResponse:
    """
    Readiness probe

    A degraded store still serves requests, so it counts as ready; the
    degraded flag and error are reported alongside.
    """
    store = getattr(request.app.state, "subscription_store", None)

    if store is None or store.is_loading:
        logger.warning("Readiness probe failed: subscription store not loaded")
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "subscription store not loaded"},
        )

    return JSONResponse(
        status_code=200,
        content={
            "status": "ready",
            "store_state": store.state.value,
            "degraded": store.state.value == "degraded",
            "error": store.error,
        },
    )
