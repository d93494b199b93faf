"""
Main API router that aggregates all endpoint routers.
"""

from fastapi import APIRouter

from bidflow.api.endpoints import followups, lifecycle

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    followups.router,
    tags=["Follow-ups"],
)

api_router.include_router(
    lifecycle.router,
    prefix="/projects",
    tags=["Project Lifecycle"],
)
