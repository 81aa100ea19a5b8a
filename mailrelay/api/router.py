"""
API Router

Aggregates all web endpoints.
"""

from fastapi import APIRouter

from mailrelay.api import health, view

api_router = APIRouter()

# Include all routers
api_router.include_router(
    view.router,
    tags=["view"],
)

api_router.include_router(
    health.router,
    tags=["health"],
)
