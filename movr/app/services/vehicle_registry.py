"""
Vehicle registry service.

Reads and writes vehicle rows. The in-use flag is only ever flipped through
``claim_vehicle`` / ``release_vehicle``, which are guarded updates: the row
changes only if it is still in the expected state.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from movr.app.core.exceptions import ResourceNotFoundError, ConflictError
from movr.app.models.vehicle import Vehicle
from movr.app.models.location_history import LocationHistory
from movr.app.models.ride import Ride


async def get_vehicle(db: AsyncSession, vehicle_id: str) -> Vehicle:
    """
    Load a vehicle by ID.

    Raises:
        ResourceNotFoundError: If no vehicle has this ID
    """
    result = await db.execute(
        select(Vehicle).where(Vehicle.id == vehicle_id)
    )
    vehicle = result.scalar_one_or_none()

    if not vehicle:
        raise ResourceNotFoundError("Vehicle", vehicle_id)

    return vehicle


async def list_vehicles(db: AsyncSession, max_vehicles: int) -> List[Vehicle]:
    """Return at most ``max_vehicles`` vehicles, oldest registrations first."""
    result = await db.execute(
        select(Vehicle).order_by(Vehicle.created_at, Vehicle.id).limit(max_vehicles)
    )
    return list(result.scalars().all())


async def create_vehicle(
    db: AsyncSession,
    battery: int,
    vehicle_type: str,
    latitude: float,
    longitude: float,
    now: datetime
) -> Vehicle:
    """Add a new, available vehicle at the given position. Flushes, does not commit."""
    vehicle = Vehicle(
        battery=battery,
        in_use=False,
        vehicle_type=vehicle_type,
        last_latitude=latitude,
        last_longitude=longitude,
        last_checkin=now
    )
    db.add(vehicle)
    await db.flush()
    return vehicle


async def _set_in_use(
    db: AsyncSession,
    vehicle_id: str,
    in_use: bool,
    **values
) -> bool:
    result = await db.execute(
        update(Vehicle)
        .where(Vehicle.id == vehicle_id, Vehicle.in_use == (not in_use))
        .values(in_use=in_use, **values)
        .execution_options(synchronize_session="evaluate")
    )
    return result.rowcount == 1


async def claim_vehicle(db: AsyncSession, vehicle_id: str, now: datetime) -> None:
    """
    Mark an available vehicle as in use from ``now``.

    The update only matches while ``in_use`` is false, so of two concurrent
    callers at most one can claim the vehicle.

    Raises:
        ConflictError: If the vehicle is already in use
    """
    if not await _set_in_use(db, vehicle_id, True, last_checkin=now):
        raise ConflictError(
            f"Vehicle {vehicle_id} is currently in use",
            details={"vehicle_id": vehicle_id}
        )


async def release_vehicle(
    db: AsyncSession,
    vehicle_id: str,
    battery: int,
    latitude: float,
    longitude: float,
    now: datetime
) -> None:
    """
    Mark an in-use vehicle as available and record where it was left.

    Raises:
        ConflictError: If the vehicle is not in use
    """
    released = await _set_in_use(
        db,
        vehicle_id,
        False,
        battery=battery,
        last_latitude=latitude,
        last_longitude=longitude,
        last_checkin=now
    )
    if not released:
        raise ConflictError(
            f"Vehicle {vehicle_id} is not in use",
            details={"vehicle_id": vehicle_id}
        )


async def delete_vehicle(db: AsyncSession, vehicle_id: str) -> None:
    """
    Remove a vehicle and its location history.

    Rides keep their row with the vehicle reference cleared.

    Raises:
        ResourceNotFoundError: If the vehicle does not exist
        ConflictError: If the vehicle is in use
    """
    vehicle = await get_vehicle(db, vehicle_id)
    if vehicle.in_use:
        raise ConflictError(
            f"Vehicle {vehicle_id} is currently in use",
            details={"vehicle_id": vehicle_id}
        )

    await db.execute(
        update(Ride).where(Ride.vehicle_id == vehicle_id).values(vehicle_id=None)
    )
    await db.execute(
        delete(LocationHistory).where(LocationHistory.vehicle_id == vehicle_id)
    )
    await db.delete(vehicle)
    await db.flush()


def last_known_position(vehicle: Vehicle) -> Optional[tuple]:
    """(latitude, longitude, timestamp) kept on the vehicle row, if any."""
    if vehicle.last_latitude is None or vehicle.last_longitude is None:
        return None
    return (vehicle.last_latitude, vehicle.last_longitude, vehicle.last_checkin)
