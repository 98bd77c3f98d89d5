"""Unit endpoints: list with counts, CRUD, and the delete pre-check."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from yardtrack.api.v1.auth import get_current_user, require_permission
from yardtrack.api.v1.errors import to_http_exception
from yardtrack.core.database import get_db
from yardtrack.schemas.units import Unit, UnitCreate, UnitDeleteCheck, UnitsListResponse, UnitUpdate
from yardtrack.schemas.users import SystemUser
from yardtrack.services import units as unit_service
from yardtrack.services.errors import ServiceError

router = APIRouter()

CanViewUnits = Annotated[SystemUser, Depends(require_permission("can_view_units"))]
CanEditUnits = Annotated[SystemUser, Depends(require_permission("can_edit_units"))]
Db = Annotated[Session, Depends(get_db)]


@router.get("", response_model=UnitsListResponse)
def list_units(
    _user: Annotated[SystemUser, Depends(get_current_user)],
    db: Db,
) -> UnitsListResponse:
    """All units with vehicle and user counts. Every authenticated user needs units for the movement forms."""
    return UnitsListResponse(units=unit_service.list_units(db))


@router.get("/{unit_id}", response_model=Unit)
def get_unit(unit_id: str, _user: CanViewUnits, db: Db) -> Unit:
    unit = unit_service.get_unit(db, unit_id)
    if unit is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unit not found.")
    return unit


@router.post("", response_model=Unit, status_code=status.HTTP_201_CREATED)
def create_unit(body: UnitCreate, _user: CanEditUnits, db: Db) -> Unit:
    try:
        return unit_service.create_unit(db, body)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.patch("/{unit_id}", response_model=Unit)
def update_unit(unit_id: str, body: UnitUpdate, _user: CanEditUnits, db: Db) -> Unit:
    try:
        return unit_service.update_unit(db, unit_id, body)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/{unit_id}/can-delete", response_model=UnitDeleteCheck)
def can_delete_unit(unit_id: str, _user: CanEditUnits, db: Db) -> UnitDeleteCheck:
    try:
        return unit_service.can_delete_unit(db, unit_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_unit(unit_id: str, _user: CanEditUnits, db: Db) -> Response:
    try:
        unit_service.delete_unit(db, unit_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
