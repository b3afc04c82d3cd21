"""
Vehicle Pydantic schemas.

Defines request and response models for vehicle management and the
anonymous checkout/checkin flow. Range checks on battery and coordinates
are performed by the lifecycle so that every violation is reported.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from movr.app.models.ride_enums import VehicleState


class VehicleCreate(BaseModel):
    """Schema for registering a new vehicle."""
    battery: int = Field(..., description="Battery charge in percent (0-100)")
    latitude: float = Field(..., description="Initial latitude (-90 to 90)")
    longitude: float = Field(..., description="Initial longitude (-180 to 180)")
    vehicle_type: str = Field(..., min_length=1, max_length=100, description="Vehicle type (e.g., scooter, bike)")


class VehicleCreateResponse(BaseModel):
    """Response after registering a vehicle."""
    vehicle_id: str
    messages: List[str]


class CheckinRequest(BaseModel):
    """Schema for checking a vehicle back in."""
    battery: int
    latitude: float
    longitude: float


class TripSummaryResponse(BaseModel):
    """Distance, duration and average speed of a finished trip."""
    distance_km: float
    duration_minutes: float
    velocity_kmh: float


class TripCompleteResponse(BaseModel):
    """Response after a checkin or a ride end."""
    vehicle_id: str
    summary: TripSummaryResponse
    messages: List[str]


class MessagesResponse(BaseModel):
    messages: List[str]


class LocationHistoryResponse(BaseModel):
    """Single location history entry."""
    id: str
    ts: datetime
    latitude: float
    longitude: float

    class Config:
        from_attributes = True


class VehicleResponse(BaseModel):
    """Vehicle with its last known position."""
    id: str
    battery: int
    in_use: bool
    state: VehicleState
    vehicle_type: str
    last_latitude: Optional[float]
    last_longitude: Optional[float]
    timestamp: Optional[datetime]


class VehicleDetailResponse(VehicleResponse):
    """Vehicle with its full location history, oldest first."""
    location_history: List[LocationHistoryResponse]
