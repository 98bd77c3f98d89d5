"""Vehicle endpoints: list/filter/search and CRUD."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from yardtrack.api.v1.auth import require_permission
from yardtrack.api.v1.errors import to_http_exception
from yardtrack.core.database import get_db
from yardtrack.schemas.users import SystemUser
from yardtrack.schemas.vehicles import (
    Vehicle,
    VehicleCreate,
    VehicleLocation,
    VehiclesListResponse,
    VehicleUpdate,
)
from yardtrack.services import vehicles as vehicle_service
from yardtrack.services.errors import ServiceError

router = APIRouter()

CanViewVehicles = Annotated[SystemUser, Depends(require_permission("can_view_vehicles"))]
CanEditVehicles = Annotated[SystemUser, Depends(require_permission("can_edit_vehicles"))]
Db = Annotated[Session, Depends(get_db)]


@router.get("", response_model=VehiclesListResponse)
def list_vehicles(
    _user: CanViewVehicles,
    db: Db,
    q: Annotated[str | None, Query(max_length=100)] = None,
    unit_id: str | None = None,
    location: VehicleLocation | None = None,
) -> VehiclesListResponse:
    """
    List vehicles ordered by plate.

    With q, search plate/make/model/color (filters are ignored); otherwise filter by unit and location.
    """
    if q:
        vehicles = vehicle_service.search_vehicles(db, q)
    else:
        vehicles = vehicle_service.list_vehicles(db, unit_id=unit_id, location=location)
    return VehiclesListResponse(vehicles=vehicles)


@router.get("/by-plate/{plate}", response_model=Vehicle)
def get_vehicle_by_plate(plate: str, _user: CanViewVehicles, db: Db) -> Vehicle:
    vehicle = vehicle_service.get_vehicle_by_plate(db, plate)
    if vehicle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found.")
    return vehicle


@router.get("/{vehicle_id}", response_model=Vehicle)
def get_vehicle(vehicle_id: str, _user: CanViewVehicles, db: Db) -> Vehicle:
    vehicle = vehicle_service.get_vehicle(db, vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found.")
    return vehicle


@router.post("", response_model=Vehicle, status_code=status.HTTP_201_CREATED)
def create_vehicle(body: VehicleCreate, _user: CanEditVehicles, db: Db) -> Vehicle:
    try:
        return vehicle_service.create_vehicle(db, body)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.patch("/{vehicle_id}", response_model=Vehicle)
def update_vehicle(vehicle_id: str, body: VehicleUpdate, _user: CanEditVehicles, db: Db) -> Vehicle:
    try:
        return vehicle_service.update_vehicle(db, vehicle_id, body)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_vehicle(vehicle_id: str, _user: CanEditVehicles, db: Db) -> Response:
    try:
        vehicle_service.delete_vehicle(db, vehicle_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
