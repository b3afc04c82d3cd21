"""
Ride schemas for the user-attributed start/end flow.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List

from movr.app.models.ride_enums import RideState


class RideStartRequest(BaseModel):
    """Start a ride. Both fields are required; missing ones yield 400."""
    vehicle_id: Optional[str] = None
    email: Optional[str] = None


class RideEndRequest(BaseModel):
    """End the active ride and report where the vehicle was left."""
    vehicle_id: Optional[str] = None
    email: Optional[str] = None
    battery: int
    latitude: float
    longitude: float


class RideResponse(BaseModel):
    id: str
    vehicle_id: Optional[str]
    user_email: Optional[str]
    start_ts: datetime
    end_ts: Optional[datetime]

    class Config:
        from_attributes = True


class RideStartResponse(BaseModel):
    ride: RideResponse
    messages: List[str]


class ActiveRideResponse(BaseModel):
    """The open ride of a user on a vehicle, with its start position."""
    ride_id: str
    id: str  # vehicle id
    in_use: bool
    battery: int
    vehicle_type: str
    last_checkin: datetime
    last_latitude: float
    last_longitude: float


class UserRideResponse(BaseModel):
    """One row of a user's ride history."""
    ride_id: str
    id: Optional[str]  # vehicle id, null once the vehicle is deleted
    user_email: str
    start_time: datetime
    end_time: Optional[datetime]
    state: RideState
    in_use: Optional[bool]
    vehicle_type: Optional[str]
