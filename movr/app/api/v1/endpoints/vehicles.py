"""
Vehicle API Endpoints.

Vehicle registration, lookup, removal and the anonymous checkout/checkin
flow.
"""

from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from movr.app.core.config import settings
from movr.app.db.session import get_db
from movr.app.db.transaction import atomic
from movr.app.models.ride_enums import VehicleState
from movr.app.models.vehicle import Vehicle
from movr.app.schemas.vehicle import (
    VehicleCreate, VehicleCreateResponse, VehicleResponse, VehicleDetailResponse,
    LocationHistoryResponse, CheckinRequest, TripCompleteResponse, TripSummaryResponse,
    MessagesResponse
)
from movr.app.services import location_ledger, ride_lifecycle, vehicle_registry

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


def to_vehicle_response(vehicle: Vehicle) -> VehicleResponse:
    return VehicleResponse(
        id=vehicle.id,
        battery=vehicle.battery,
        in_use=vehicle.in_use,
        state=VehicleState.IN_USE if vehicle.in_use else VehicleState.AVAILABLE,
        vehicle_type=vehicle.vehicle_type,
        last_latitude=vehicle.last_latitude,
        last_longitude=vehicle.last_longitude,
        timestamp=vehicle.last_checkin
    )


@router.get("", response_model=List[VehicleResponse])
async def list_vehicles(
    max_vehicles: Optional[int] = Query(None, ge=1, description="Maximum number of vehicles to return"),
    db: AsyncSession = Depends(get_db)
):
    """
    List vehicles with their last known position.

    Defaults to ``settings.default_max_vehicles`` rows.
    """
    limit = max_vehicles or settings.default_max_vehicles
    vehicles = await vehicle_registry.list_vehicles(db, limit)
    return [to_vehicle_response(vehicle) for vehicle in vehicles]


@router.post("/add", response_model=VehicleCreateResponse, status_code=status.HTTP_201_CREATED)
async def add_vehicle(
    vehicle_data: VehicleCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a vehicle at its initial position.

    Returns the generated vehicle ID.
    """
    vehicle = await ride_lifecycle.add_vehicle(
        db,
        battery=vehicle_data.battery,
        vehicle_type=vehicle_data.vehicle_type,
        latitude=vehicle_data.latitude,
        longitude=vehicle_data.longitude
    )
    return VehicleCreateResponse(
        vehicle_id=vehicle.id,
        messages=[f"Vehicle {vehicle.id} added"]
    )


@router.get("/{vehicle_id}", response_model=VehicleDetailResponse)
async def get_vehicle(
    vehicle_id: str = Path(..., description="Vehicle ID"),
    db: AsyncSession = Depends(get_db)
):
    """Get a vehicle with its full location history, oldest entry first."""
    vehicle = await vehicle_registry.get_vehicle(db, vehicle_id)
    history = await location_ledger.history_for_vehicle(db, vehicle_id)

    return VehicleDetailResponse(
        **to_vehicle_response(vehicle).model_dump(),
        location_history=[LocationHistoryResponse.model_validate(entry) for entry in history]
    )


@router.delete("/{vehicle_id}/delete", response_model=MessagesResponse)
async def delete_vehicle(
    vehicle_id: str = Path(..., description="Vehicle ID"),
    db: AsyncSession = Depends(get_db)
):
    """
    Remove a vehicle.

    Returns 409 while the vehicle is in use.
    """
    async with atomic(db, "delete_vehicle"):
        await vehicle_registry.delete_vehicle(db, vehicle_id)

    return MessagesResponse(messages=[f"Deleted vehicle with id {vehicle_id} from database."])


@router.put("/{vehicle_id}/checkout", response_model=MessagesResponse)
async def checkout_vehicle(
    vehicle_id: str = Path(..., description="Vehicle ID"),
    db: AsyncSession = Depends(get_db)
):
    """
    Check out an available vehicle.

    Returns 409 if the vehicle is already in use.
    """
    await ride_lifecycle.checkout(db, vehicle_id)
    return MessagesResponse(messages=[f"Ride started with vehicle {vehicle_id}"])


@router.put("/{vehicle_id}/checkin", response_model=TripCompleteResponse)
async def checkin_vehicle(
    checkin_data: CheckinRequest,
    vehicle_id: str = Path(..., description="Vehicle ID"),
    db: AsyncSession = Depends(get_db)
):
    """
    Check a vehicle in and report distance, duration and average speed.

    Returns 400 listing every out-of-range value, 409 if the vehicle is not
    checked out.
    """
    summary = await ride_lifecycle.checkin(
        db,
        vehicle_id,
        battery=checkin_data.battery,
        latitude=checkin_data.latitude,
        longitude=checkin_data.longitude
    )
    return TripCompleteResponse(
        vehicle_id=vehicle_id,
        summary=TripSummaryResponse(**summary._asdict()),
        messages=ride_lifecycle.trip_messages(vehicle_id, summary)
    )
