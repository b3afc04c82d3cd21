"""
Ride API Endpoints.

Riders start and end rides on vehicles; the trip summary is returned when
the ride ends.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from movr.app.core.exceptions import BadRequestError
from movr.app.db.session import get_db
from movr.app.models.ride_enums import RideState
from movr.app.schemas.ride import (
    RideStartRequest, RideEndRequest, RideResponse, RideStartResponse,
    ActiveRideResponse, UserRideResponse
)
from movr.app.schemas.vehicle import TripCompleteResponse, TripSummaryResponse
from movr.app.services import ride_lifecycle, user_directory

router = APIRouter(prefix="/rides", tags=["Rides"])


def require_vehicle_id(vehicle_id: Optional[str], action: str) -> str:
    if not vehicle_id:
        raise BadRequestError(f"Unable to {action} ride. No vehicle id provided.")
    return vehicle_id


@router.post("/start", response_model=RideStartResponse)
async def start_ride(
    ride_data: RideStartRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Start a ride on a vehicle for a user.

    Returns 404 if the user or vehicle is unknown, 409 if the vehicle is
    already in use.
    """
    user_directory.require_email(ride_data.email, "Unable to start ride. No user email provided.")
    vehicle_id = require_vehicle_id(ride_data.vehicle_id, "start")

    ride = await ride_lifecycle.start_ride(db, vehicle_id, ride_data.email)

    return RideStartResponse(
        ride=RideResponse.model_validate(ride),
        messages=[f"Ride started with vehicle {vehicle_id}"]
    )


@router.post("/end", response_model=TripCompleteResponse)
async def end_ride(
    ride_data: RideEndRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    End the active ride and report distance, duration and average speed.

    Returns 400 listing every out-of-range value, 404 if there is no active
    ride for this vehicle and user.
    """
    user_directory.require_email(ride_data.email, "Unable to end ride. No user email provided.")
    vehicle_id = require_vehicle_id(ride_data.vehicle_id, "end")

    summary = await ride_lifecycle.end_ride(
        db,
        vehicle_id,
        ride_data.email,
        battery=ride_data.battery,
        latitude=ride_data.latitude,
        longitude=ride_data.longitude
    )
    return TripCompleteResponse(
        vehicle_id=vehicle_id,
        summary=TripSummaryResponse(**summary._asdict()),
        messages=ride_lifecycle.trip_messages(vehicle_id, summary)
    )


@router.get("/active", response_model=ActiveRideResponse)
async def active_ride(
    vehicle_id: Optional[str] = Query(None, description="Vehicle being ridden"),
    email: Optional[str] = Query(None, description="Email of the rider"),
    db: AsyncSession = Depends(get_db)
):
    """Get the active ride of a user on a vehicle."""
    user_directory.require_email(email)
    vehicle_id = require_vehicle_id(vehicle_id, "find")

    active = await ride_lifecycle.active_ride(db, vehicle_id, email)

    return ActiveRideResponse(
        ride_id=active.ride.id,
        id=active.vehicle.id,
        in_use=active.vehicle.in_use,
        battery=active.vehicle.battery,
        vehicle_type=active.vehicle.vehicle_type,
        last_checkin=active.start.ts,
        last_latitude=active.start.latitude,
        last_longitude=active.start.longitude
    )


@router.get("", response_model=List[UserRideResponse])
async def rides_for_user(
    email: Optional[str] = Query(None, description="Email of the rider"),
    db: AsyncSession = Depends(get_db)
):
    """
    List every ride of a user, active rides first.

    Returns 404 when the user has no rides.
    """
    rides = await ride_lifecycle.rides_for_user(db, email)

    return [
        UserRideResponse(
            ride_id=ride.id,
            id=ride.vehicle_id,
            user_email=ride.user_email,
            start_time=ride.start_ts,
            end_time=ride.end_ts,
            state=RideState.ACTIVE if ride.is_active else RideState.ENDED,
            in_use=vehicle.in_use if vehicle else None,
            vehicle_type=vehicle.vehicle_type if vehicle else None
        )
        for ride, vehicle in rides
    ]
