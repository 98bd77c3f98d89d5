"""Movement endpoints: register exits/entries, finalize trips, list and search."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from yardtrack.api.v1.auth import require_permission
from yardtrack.api.v1.errors import to_http_exception
from yardtrack.core.database import get_db
from yardtrack.schemas.movements import (
    Movement,
    MovementCreate,
    MovementFinalize,
    MovementsListResponse,
)
from yardtrack.schemas.users import SystemUser
from yardtrack.schemas.vehicles import VehicleLocation
from yardtrack.services import movements as movement_service
from yardtrack.services.errors import ServiceError

router = APIRouter()

CanViewMovements = Annotated[SystemUser, Depends(require_permission("can_view_movements"))]
CanCreateMovements = Annotated[SystemUser, Depends(require_permission("can_create_movements"))]
CanEditMovements = Annotated[SystemUser, Depends(require_permission("can_edit_movements"))]
Db = Annotated[Session, Depends(get_db)]


@router.get("", response_model=MovementsListResponse)
def list_movements(
    _user: CanViewMovements,
    db: Db,
    q: Annotated[str | None, Query(max_length=100)] = None,
    vehicle_id: str | None = None,
    status_filter: Annotated[VehicleLocation | None, Query(alias="status")] = None,
) -> MovementsListResponse:
    """
    List movements, newest first.

    q searches driver, destination and plate; otherwise filter by vehicle_id or status (yard/out).
    """
    if q:
        movements = movement_service.search_movements(db, q)
    elif vehicle_id:
        movements = movement_service.list_movements_by_vehicle(db, vehicle_id)
    elif status_filter is not None:
        movements = movement_service.list_movements_by_status(db, status_filter)
    else:
        movements = movement_service.list_movements(db)
    return MovementsListResponse(movements=movements)


@router.get("/{movement_id}", response_model=Movement)
def get_movement(movement_id: str, _user: CanViewMovements, db: Db) -> Movement:
    movement = movement_service.get_movement(db, movement_id)
    if movement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movement not found.")
    return movement


@router.post("", response_model=Movement, status_code=status.HTTP_201_CREATED)
def create_movement(body: MovementCreate, current_user: CanCreateMovements, db: Db) -> Movement:
    """Register a vehicle exit or entry; the vehicle's location follows the movement."""
    try:
        return movement_service.create_movement(db, body, user_id=current_user.id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.post("/{movement_id}/finalize", response_model=Movement)
def finalize_movement(
    movement_id: str,
    body: MovementFinalize,
    _user: CanCreateMovements,
    db: Db,
) -> Movement:
    """Close an open movement with arrival data (vehicle return)."""
    try:
        return movement_service.finalize_movement(db, movement_id, body)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.delete("/{movement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_movement(movement_id: str, _user: CanEditMovements, db: Db) -> Response:
    try:
        movement_service.delete_movement(db, movement_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
