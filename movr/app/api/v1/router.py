"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from movr.app.core.config import settings
from movr.app.api.v1.endpoints import vehicles, users, rides

router = APIRouter()

# Vehicles, location history, checkout/checkin
router.include_router(vehicles.router)

# Users and user-attributed rides
if settings.user_rides_enabled:
    router.include_router(users.router)
    router.include_router(rides.router)
