"""Liveness route for the event lifecycle API.

Does not touch the database; storage outages surface as 503 on the event routes.
"""

from fastapi import APIRouter

from event_lifecycle import __version__
from event_lifecycle.config.environment import IS_PRODUCTION_ENVIRONMENT

router = APIRouter(tags=["health"])

@router.get("/")
async def health_check():
    """Report that the API process is up, with its environment and package version."""
    return {
        "status": "healthy",
        "environment": "production" if IS_PRODUCTION_ENVIRONMENT else "development",
        "version": __version__
    }
