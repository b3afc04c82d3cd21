"""
Shared test constants and lookups.
"""

from datetime import datetime

from sqlalchemy import select, func

from movr.app.models.location_history import LocationHistory

# Fixed clock for lifecycle tests
T0 = datetime(2024, 5, 1, 12, 0, 0)
RIDER_EMAIL = "rider@test.com"


async def history_count(db, vehicle_id):
    result = await db.execute(
        select(func.count(LocationHistory.id)).where(LocationHistory.vehicle_id == vehicle_id)
    )
    return result.scalar()
