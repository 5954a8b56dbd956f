# 📄 File: substore/modules/subscription/presentation/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes the web side of the subscription module - the endpoints screens call and the shapes
# of the data they exchange.
#
# 🧪 Purpose (Technical Summary):
# Presentation layer initialization providing the FastAPI router, Pydantic schemas and
# dependencies for the subscription HTTP endpoints.
#
# 🔗 Dependencies:
# - FastAPI for HTTP endpoint routing and OpenAPI documentation
# - substore.modules.subscription.domain (store service, models)
#
# 🔄 Connected Modules / Calls From:
# - substore.api.v1.router

"""
Subscription Presentation Layer

Presentation Components:
- API Router: /api/v1/subscription endpoints
- Pydantic Schemas: Request/response validation and documentation
- Dependencies: Store lookup and plan resolution
"""

__all__ = [
    "api",
    "dependencies",
]
