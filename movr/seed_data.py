"""
Database seeding script for demo data.

Creates a handful of vehicles around a city centre and one demo rider.
Run this script after the database is reachable and before first use.
"""

import asyncio
import random

from sqlalchemy import select, func

from movr.app.db.session import AsyncSessionLocal, engine, Base
from movr.app.db.transaction import atomic
from movr.app.models.vehicle import Vehicle
from movr.app.services import ride_lifecycle, user_directory

# New York City
CENTRE_LAT = 40.7128
CENTRE_LON = -74.0060
VEHICLE_TYPES = ["scooter", "bike", "skateboard"]
DEMO_EMAIL = "rider@movr.example"


async def seed(vehicle_count: int = 10) -> None:
    """
    Seed demo vehicles and a demo user.

    Skips seeding when vehicles already exist.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting MovR seeding...")

        result = await db.execute(select(func.count(Vehicle.id)))
        if result.scalar() > 0:
            print("ℹ️  Vehicles already exist, skipping seeding")
            return

        for _ in range(vehicle_count):
            vehicle = await ride_lifecycle.add_vehicle(
                db,
                battery=random.randint(20, 100),
                vehicle_type=random.choice(VEHICLE_TYPES),
                latitude=round(CENTRE_LAT + random.uniform(-0.05, 0.05), 6),
                longitude=round(CENTRE_LON + random.uniform(-0.05, 0.05), 6)
            )
            print(f"✅ Added {vehicle.vehicle_type} {vehicle.id}")

        async with atomic(db, "seed_user"):
            await user_directory.register_user(
                db,
                email=DEMO_EMAIL,
                first_name="Demo",
                last_name="Rider",
                phone_numbers=["555-0100"]
            )
        print(f"✅ Created demo user ({DEMO_EMAIL})")

        print("\n🎉 Seeding completed successfully!")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
