"""
Vehicle database model.

A vehicle is a rentable scooter or bike with a battery level and an
in-use flag that tracks whether it is currently checked out or ridden.
"""

import uuid
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime
from sqlalchemy.sql import func
from movr.app.db.session import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Vehicle(Base):
    """
    Vehicle model.

    ``in_use`` is true exactly while a checkout or ride is open for the
    vehicle. The ``last_*`` columns hold the last known position; with
    location history enabled they mirror the newest history entry.
    """
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=new_id)

    battery = Column(Integer, nullable=False)
    in_use = Column(Boolean, default=False, nullable=False, index=True)
    vehicle_type = Column(String(100), nullable=False)

    # Last known position
    last_latitude = Column(Float, nullable=True)
    last_longitude = Column(Float, nullable=True)
    last_checkin = Column(DateTime, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Vehicle(id={self.id}, type='{self.vehicle_type}', in_use={self.in_use}, battery={self.battery})>"
