"""
Location ledger service.

Append-only history of vehicle positions.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from movr.app.models.location_history import LocationHistory


async def append_location(
    db: AsyncSession,
    vehicle_id: str,
    latitude: float,
    longitude: float,
    ts: datetime
) -> LocationHistory:
    """
    Append a position for a vehicle.

    Args:
        db: Database session
        vehicle_id: Vehicle the position belongs to
        latitude: Latitude in degrees
        longitude: Longitude in degrees
        ts: Time the vehicle was at this position

    Returns:
        The new entry (flushed, not committed)
    """
    entry = LocationHistory(
        vehicle_id=vehicle_id,
        ts=ts,
        latitude=latitude,
        longitude=longitude
    )
    db.add(entry)
    await db.flush()
    return entry


async def most_recent_location(db: AsyncSession, vehicle_id: str) -> Optional[LocationHistory]:
    """Newest entry for a vehicle, or None if it has no history."""
    result = await db.execute(
        select(LocationHistory)
        .where(LocationHistory.vehicle_id == vehicle_id)
        .order_by(LocationHistory.ts.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def location_at(db: AsyncSession, vehicle_id: str, ts: datetime) -> Optional[LocationHistory]:
    """Entry recorded for a vehicle at exactly ``ts``, or None."""
    result = await db.execute(
        select(LocationHistory)
        .where(LocationHistory.vehicle_id == vehicle_id, LocationHistory.ts == ts)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def history_for_vehicle(db: AsyncSession, vehicle_id: str) -> List[LocationHistory]:
    """Full history of a vehicle, oldest first."""
    result = await db.execute(
        select(LocationHistory)
        .where(LocationHistory.vehicle_id == vehicle_id)
        .order_by(LocationHistory.ts.asc())
    )
    return list(result.scalars().all())

