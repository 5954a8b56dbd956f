# 📄 File: substore/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# The traffic director for version 1 requests: sends subscription requests to the subscription
# endpoints and health checks to the health endpoints.
# 🧪 Purpose (Technical Summary):
# Main API v1 router aggregation combining the health router and module routers under their
# configured prefixes.
# 🔗 Dependencies:
# FastAPI, substore.api.v1.health, substore.modules.subscription.presentation.api.v1
# 🔄 Connected Modules / Calls From:
# substore.main

from fastapi import APIRouter

from substore.modules.subscription.presentation.api.v1 import subscription_router
from substore.shared.utils.logging import get_logger

from . import API_TAGS, ROUTE_PREFIXES, get_api_info
from .health import health_router

logger = get_logger(__name__)

# Create main API v1 router
api_v1_router = APIRouter()

# Include health check router (no prefix - direct access)
api_v1_router.include_router(
    health_router,
    tags=[API_TAGS["health"]]
)

# =========================================================================
# API V1 INFO ENDPOINT
# =========================================================================

@api_v1_router.get("/",
                   summary="API v1 Information",
                   description="Get API v1 version information and available endpoints",
                   tags=["API Info"])
async def api_v1_info() -> dict:
    """API v1 version details and module route prefixes."""
    return {
        **get_api_info(),
        "documentation": {
            "openapi_schema": "/openapi.json",
            "swagger_ui": "/docs",
        },
    }


# =========================================================================
# MODULE ROUTER INCLUDES
# =========================================================================

api_v1_router.include_router(
    subscription_router,
    prefix=ROUTE_PREFIXES["subscription"],
    tags=[API_TAGS["subscription"]]
)
logger.debug("Subscription router loaded", prefix=ROUTE_PREFIXES["subscription"])
