"""API router aggregation.

Each domain module owns one router; it is mounted here under its URL
segment and tagged for the OpenAPI docs.
"""

from fastapi import APIRouter

from wastems.api.endpoints import (
    analytics,
    auth,
    citizens,
    collection,
    community,
    facilities,
    green_champions,
    health,
    incentives,
    monitoring,
    shop,
    ulb,
    waste,
    workers,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(citizens.router, prefix="/citizens", tags=["citizens"])
api_router.include_router(workers.router, prefix="/workers", tags=["workers"])
api_router.include_router(
    green_champions.router, prefix="/green-champions", tags=["green-champions"]
)
api_router.include_router(waste.router, prefix="/waste", tags=["waste"])
api_router.include_router(collection.router, prefix="/collection", tags=["collection"])
api_router.include_router(facilities.router, prefix="/facilities", tags=["facilities"])
api_router.include_router(monitoring.router, prefix="/monitoring", tags=["monitoring"])
api_router.include_router(incentives.router, prefix="/incentives", tags=["incentives"])
api_router.include_router(community.router, prefix="/community", tags=["community"])
api_router.include_router(ulb.router, prefix="/ulb", tags=["ulb"])
api_router.include_router(shop.router, prefix="/shop", tags=["shop"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
