"""
Ride lifecycle service.

State transitions of a vehicle through anonymous checkout/checkin and
user-attributed ride start/end. Every transition runs as one atomic unit on
the session it is given; a failure at any step leaves no partial writes.

Vehicle states:   AVAILABLE -> IN_USE -> AVAILABLE
Ride states:      NONE -> ACTIVE -> ENDED
"""

import logging
import math
from datetime import datetime, timezone
from typing import List, NamedTuple, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from movr.app.core.config import settings
from movr.app.core.exceptions import RideValidationError, ResourceNotFoundError, ConflictError
from movr.app.db.transaction import atomic
from movr.app.models.location_history import LocationHistory
from movr.app.models.ride import Ride
from movr.app.models.vehicle import Vehicle
from movr.app.services.geo import TripSummary, summarize_trip
from movr.app.services import location_ledger, ride_ledger, user_directory, vehicle_registry

logger = logging.getLogger("movr.lifecycle")


class Position(NamedTuple):
    latitude: float
    longitude: float
    ts: datetime


class ActiveRide(NamedTuple):
    ride: Ride
    vehicle: Vehicle
    start: LocationHistory


def utcnow() -> datetime:
    """Current time as naive UTC, matching the timestamp columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _within(value: float, low: float, high: float) -> bool:
    return math.isfinite(value) and low <= value <= high


def validate_ride_values(battery: float, latitude: float, longitude: float) -> None:
    """
    Check battery and coordinates, reporting every violation at once.

    NaN and infinity are out of range for every field.

    Raises:
        RideValidationError: If any value is out of range
    """
    messages = []
    if not _within(longitude, -180, 180):
        messages.append("Longitude must be between -180 and 180")
    if not _within(latitude, -90, 90):
        messages.append("Latitude must be between -90 and 90")
    if not _within(battery, 0, 100):
        messages.append("Battery (percent) must be between 0 and 100.")
    if messages:
        raise RideValidationError(messages)


def trip_messages(vehicle_id: str, summary: TripSummary) -> List[str]:
    return [
        f"You have completed your ride on vehicle {vehicle_id}.",
        f"You traveled {summary.distance_km:.2f} km in {summary.duration_minutes:.2f} minutes, "
        f"for an average velocity of {summary.velocity_kmh:.2f} km/h"
    ]


async def _last_position(db: AsyncSession, vehicle: Vehicle) -> Position:
    """
    Where the vehicle was last seen.

    Read from the location history when it is kept, otherwise from the
    position columns on the vehicle row.
    """
    if settings.location_history_enabled:
        entry = await location_ledger.most_recent_location(db, vehicle.id)
        if entry is not None:
            return Position(entry.latitude, entry.longitude, entry.ts)
    else:
        known = vehicle_registry.last_known_position(vehicle)
        if known is not None:
            return Position(*known)
    raise ResourceNotFoundError(
        "Location history",
        message=f"No known location for vehicle {vehicle.id}"
    )


async def add_vehicle(
    db: AsyncSession,
    battery: int,
    vehicle_type: str,
    latitude: float,
    longitude: float,
    now: Optional[datetime] = None
) -> Vehicle:
    """
    Register an available vehicle at its initial position.

    The vehicle row and its first location entry are written together.
    """
    validate_ride_values(battery, latitude, longitude)
    now = now or utcnow()

    async with atomic(db, "add_vehicle"):
        vehicle = await vehicle_registry.create_vehicle(
            db, battery, vehicle_type, latitude, longitude, now
        )
        if settings.location_history_enabled:
            await location_ledger.append_location(db, vehicle.id, latitude, longitude, now)

    logger.info("Vehicle %s added (%s, battery %s%%)", vehicle.id, vehicle_type, battery)
    return vehicle


async def checkout(db: AsyncSession, vehicle_id: str, now: Optional[datetime] = None) -> Vehicle:
    """
    Check out an available vehicle without attributing it to a user.

    Records the vehicle's last known position at the current time and marks
    it in use.

    Raises:
        ResourceNotFoundError: If the vehicle or its position is unknown
        ConflictError: If the vehicle is already in use
    """
    now = now or utcnow()

    async with atomic(db, "checkout"):
        vehicle = await vehicle_registry.get_vehicle(db, vehicle_id)
        if vehicle.in_use:
            logger.warning("Checkout rejected: vehicle %s already in use", vehicle_id)
            raise ConflictError(
                f"Vehicle {vehicle_id} is currently in use",
                details={"vehicle_id": vehicle_id}
            )

        start = await _last_position(db, vehicle)
        await vehicle_registry.claim_vehicle(db, vehicle_id, now)
        if settings.location_history_enabled:
            await location_ledger.append_location(db, vehicle_id, start.latitude, start.longitude, now)

    logger.info("Vehicle %s checked out", vehicle_id)
    return vehicle


async def checkin(
    db: AsyncSession,
    vehicle_id: str,
    battery: int,
    latitude: float,
    longitude: float,
    now: Optional[datetime] = None
) -> TripSummary:
    """
    Check a vehicle back in at a new position.

    The most recent recorded position (the checkout point) is the start of
    the trip; the summary covers start to here.

    Raises:
        RideValidationError: If battery or coordinates are out of range
        ResourceNotFoundError: If the vehicle or its checkout point is unknown
        ConflictError: If the vehicle is not in use or is on a user ride
    """
    validate_ride_values(battery, latitude, longitude)
    now = now or utcnow()

    async with atomic(db, "checkin"):
        vehicle = await vehicle_registry.get_vehicle(db, vehicle_id)
        if not vehicle.in_use:
            logger.warning("Checkin rejected: vehicle %s is not in use", vehicle_id)
            raise ConflictError(
                f"Vehicle {vehicle_id} is not in use",
                details={"vehicle_id": vehicle_id}
            )

        # A ridden vehicle is released by end_ride only
        ride = await ride_ledger.open_ride_for_vehicle(db, vehicle_id)
        if ride is not None:
            logger.warning("Checkin rejected: vehicle %s is on ride %s", vehicle_id, ride.id)
            raise ConflictError(
                f"Vehicle {vehicle_id} is on an active ride; end the ride instead",
                details={"vehicle_id": vehicle_id, "ride_id": ride.id}
            )

        start = await _last_position(db, vehicle)
        if settings.location_history_enabled:
            await location_ledger.append_location(db, vehicle_id, latitude, longitude, now)
        await vehicle_registry.release_vehicle(db, vehicle_id, battery, latitude, longitude, now)

    summary = summarize_trip(start.latitude, start.longitude, start.ts, latitude, longitude, now)
    logger.info(
        "Vehicle %s checked in: %.2f km in %.2f min",
        vehicle_id, summary.distance_km, summary.duration_minutes
    )
    return summary


async def start_ride(
    db: AsyncSession,
    vehicle_id: str,
    email: str,
    now: Optional[datetime] = None
) -> Ride:
    """
    Start a ride for a user on an available vehicle.

    Creates the ride, records the start position and marks the vehicle in
    use, all in one transaction.

    Raises:
        ResourceNotFoundError: If the user, the vehicle or its last position is unknown
        ConflictError: If the vehicle is already in use
    """
    now = now or utcnow()

    async with atomic(db, "start_ride"):
        await user_directory.get_user(db, email)
        vehicle = await vehicle_registry.get_vehicle(db, vehicle_id)
        if vehicle.in_use:
            logger.warning("Ride start rejected: vehicle %s already in use", vehicle_id)
            raise ConflictError(
                f"Could not start ride on vehicle {vehicle_id}: the vehicle is actively being ridden",
                details={"vehicle_id": vehicle_id}
            )

        last = await location_ledger.most_recent_location(db, vehicle_id)
        if last is None:
            raise ResourceNotFoundError(
                "Location history",
                message=f"No known location for vehicle {vehicle_id}"
            )

        ride = await ride_ledger.create_ride(db, vehicle_id, email, now)
        await location_ledger.append_location(db, vehicle_id, last.latitude, last.longitude, now)
        await vehicle_registry.claim_vehicle(db, vehicle_id, now)

    logger.info("Ride %s started: vehicle %s, user %s", ride.id, vehicle_id, email)
    return ride


async def end_ride(
    db: AsyncSession,
    vehicle_id: str,
    email: str,
    battery: int,
    latitude: float,
    longitude: float,
    now: Optional[datetime] = None
) -> TripSummary:
    """
    End the active ride of a user on a vehicle.

    Raises:
        RideValidationError: If battery or coordinates are out of range
        ResourceNotFoundError: If the vehicle, the active ride or its start
            position is unknown
    """
    validate_ride_values(battery, latitude, longitude)
    now = now or utcnow()

    async with atomic(db, "end_ride"):
        await vehicle_registry.get_vehicle(db, vehicle_id)
        ride = await ride_ledger.find_open_ride(db, vehicle_id, email)
        if ride is None:
            logger.warning("Ride end rejected: no active ride for %s on %s", email, vehicle_id)
            raise ResourceNotFoundError(
                "Ride",
                message=f"No active ride found for vehicle {vehicle_id} and user {email}"
            )

        start = await location_ledger.location_at(db, vehicle_id, ride.start_ts)
        if start is None:
            raise ResourceNotFoundError(
                "Location history",
                message=f"No start location recorded for ride {ride.id}"
            )

        await ride_ledger.close_ride(db, ride, now)
        await location_ledger.append_location(db, vehicle_id, latitude, longitude, now)
        await vehicle_registry.release_vehicle(db, vehicle_id, battery, latitude, longitude, now)

    summary = summarize_trip(start.latitude, start.longitude, ride.start_ts, latitude, longitude, now)
    logger.info(
        "Ride %s ended: %.2f km in %.2f min",
        ride.id, summary.distance_km, summary.duration_minutes
    )
    return summary


async def active_ride(db: AsyncSession, vehicle_id: str, email: str) -> ActiveRide:
    """
    Look up the open ride of a user on a vehicle.

    The ride must still be open, its start position must be on record and
    the vehicle must be in use.

    Raises:
        ResourceNotFoundError: If any of these does not hold
    """
    not_found = ResourceNotFoundError("Ride", message="No active rides found.")

    vehicle = await vehicle_registry.get_vehicle(db, vehicle_id)
    if not vehicle.in_use:
        raise not_found

    ride = await ride_ledger.find_open_ride(db, vehicle_id, email)
    if ride is None:
        raise not_found

    start = await location_ledger.location_at(db, vehicle_id, ride.start_ts)
    if start is None:
        raise not_found

    return ActiveRide(ride=ride, vehicle=vehicle, start=start)


async def rides_for_user(db: AsyncSession, email: Optional[str]) -> List[Tuple[Ride, Optional[Vehicle]]]:
    """
    All rides of a user, active rides first, then by end time descending.

    Raises:
        BadRequestError: If no email is given
        ResourceNotFoundError: If the user has no rides
    """
    user_directory.require_email(email)

    rides = await ride_ledger.rides_with_vehicles(db, email)
    if not rides:
        raise ResourceNotFoundError("Ride", message="No rides found")
    return rides
