"""
Ride database model.

A ride attributes one use of a vehicle to one user.
"""

from sqlalchemy import Column, String, ForeignKey, DateTime
from movr.app.db.session import Base
from movr.app.models.vehicle import new_id


class Ride(Base):
    """
    Ride model.

    ``end_ts`` is null while the ride is active. Rides are never deleted;
    when their vehicle or user is removed the reference is cleared.
    """
    __tablename__ = "rides"

    id = Column(String(36), primary_key=True, default=new_id)

    vehicle_id = Column(String(36), ForeignKey("vehicles.id"), nullable=True, index=True)
    user_email = Column(String(255), ForeignKey("users.email"), nullable=True, index=True)

    start_ts = Column(DateTime, nullable=False)
    end_ts = Column(DateTime, nullable=True)

    @property
    def is_active(self) -> bool:
        return self.end_ts is None

    def __repr__(self):
        return f"<Ride(id={self.id}, vehicle_id={self.vehicle_id}, user='{self.user_email}', active={self.is_active})>"
