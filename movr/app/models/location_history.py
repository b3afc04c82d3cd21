"""
Location history database model.

Append-only trail of vehicle positions.
"""

from sqlalchemy import Column, String, Float, ForeignKey, DateTime, Index
from movr.app.db.session import Base
from movr.app.models.vehicle import new_id


class LocationHistory(Base):
    """
    Location history entry.

    One entry is written when a vehicle is added, when it is checked out or
    a ride starts, and when it is checked in or a ride ends. The most recent
    entry for a vehicle is the one with the greatest ``ts``.
    """
    __tablename__ = "location_history"

    id = Column(String(36), primary_key=True, default=new_id)
    vehicle_id = Column(String(36), ForeignKey("vehicles.id"), nullable=False)

    ts = Column(DateTime, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    __table_args__ = (
        Index("ix_location_history_vehicle_ts", "vehicle_id", "ts"),
    )

    def __repr__(self):
        return f"<LocationHistory(vehicle_id={self.vehicle_id}, ts={self.ts}, lat={self.latitude}, lng={self.longitude})>"
