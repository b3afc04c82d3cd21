"""
Ride ledger service.

Rides are created on start, closed on end and never deleted.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from movr.app.models.ride import Ride
from movr.app.models.vehicle import Vehicle


async def create_ride(
    db: AsyncSession,
    vehicle_id: str,
    user_email: str,
    start_ts: datetime
) -> Ride:
    """Open a ride for a user on a vehicle. Flushes, does not commit."""
    ride = Ride(
        vehicle_id=vehicle_id,
        user_email=user_email,
        start_ts=start_ts,
        end_ts=None
    )
    db.add(ride)
    await db.flush()
    return ride


async def find_open_ride(db: AsyncSession, vehicle_id: str, user_email: str) -> Optional[Ride]:
    """The ride of this user on this vehicle whose end is still null."""
    result = await db.execute(
        select(Ride)
        .where(
            Ride.vehicle_id == vehicle_id,
            Ride.user_email == user_email,
            Ride.end_ts.is_(None)
        )
        .order_by(Ride.start_ts.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def open_ride_for_vehicle(db: AsyncSession, vehicle_id: str) -> Optional[Ride]:
    """The open ride on this vehicle, whoever is riding it."""
    result = await db.execute(
        select(Ride)
        .where(Ride.vehicle_id == vehicle_id, Ride.end_ts.is_(None))
        .limit(1)
    )
    return result.scalar_one_or_none()


async def close_ride(db: AsyncSession, ride: Ride, end_ts: datetime) -> Ride:
    ride.end_ts = end_ts
    await db.flush()
    return ride


async def rides_with_vehicles(db: AsyncSession, user_email: str) -> List[Tuple[Ride, Optional[Vehicle]]]:
    """
    All rides of a user with their vehicle (None if it was deleted).

    Active rides come first, then ended rides by end time, newest first.
    """
    result = await db.execute(
        select(Ride, Vehicle)
        .outerjoin(Vehicle, Ride.vehicle_id == Vehicle.id)
        .where(Ride.user_email == user_email)
        .order_by(Ride.end_ts.desc().nulls_first(), Ride.start_ts.desc())
    )
    return [(row.Ride, row.Vehicle) for row in result.all()]
