"""Units: CRUD plus vehicle/user assignment counts that guard deletion."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from yardtrack.models import SystemUser, Unit, Vehicle
from yardtrack.schemas.units import Unit as UnitOut
from yardtrack.schemas.units import UnitCreate, UnitDeleteCheck, UnitUpdate
from yardtrack.services.errors import BusinessRuleError, ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def unit_from_row(
    row: Unit,
    vehicle_count: int | None = None,
    users_count: int | None = None,
) -> UnitOut:
    return UnitOut(
        id=row.id,
        name=row.name,
        code=row.code,
        address=row.address,
        vehicle_count=vehicle_count,
        users_count=users_count,
    )


def _count_by_unit(session: Session, column) -> dict[str, int]:
    """unit_id -> row count for a unit_id column."""
    rows = session.query(column, func.count()).group_by(column).all()
    return {unit_id: int(count) for unit_id, count in rows if unit_id is not None}


def vehicle_count_by_unit(session: Session) -> dict[str, int]:
    return _count_by_unit(session, Vehicle.unit_id)


def user_count_by_unit(session: Session) -> dict[str, int]:
    return _count_by_unit(session, SystemUser.unit_id)


def list_units(session: Session) -> list[UnitOut]:
    """All units ordered by name, each with its vehicle and user counts."""
    rows = session.query(Unit).order_by(Unit.name).all()
    vehicles = vehicle_count_by_unit(session)
    users = user_count_by_unit(session)
    return [
        unit_from_row(r, vehicles.get(r.id, 0), users.get(r.id, 0))
        for r in rows
    ]


def _get_row(session: Session, unit_id: str) -> Unit:
    row = session.query(Unit).filter(Unit.id == unit_id).first()
    if row is None:
        raise NotFoundError("Unit not found.")
    return row


def get_unit(session: Session, unit_id: str) -> UnitOut | None:
    row = session.query(Unit).filter(Unit.id == unit_id).first()
    return unit_from_row(row) if row is not None else None


def get_unit_by_code(session: Session, code: str) -> UnitOut | None:
    row = session.query(Unit).filter(Unit.code == code.strip()).first()
    return unit_from_row(row) if row is not None else None


def create_unit(session: Session, data: UnitCreate) -> UnitOut:
    code = data.code.strip()
    if session.query(Unit.id).filter(Unit.code == code).first():
        raise ConflictError(f"Unit code '{code}' is already in use.")
    row = Unit(name=data.name.strip(), code=code, address=data.address or None)
    session.add(row)
    session.commit()
    session.refresh(row)
    logger.info("Unit created", extra={"unit_id": row.id, "code": code})
    return unit_from_row(row, 0, 0)


def update_unit(session: Session, unit_id: str, data: UnitUpdate) -> UnitOut:
    row = _get_row(session, unit_id)
    if data.code is not None and data.code.strip() != row.code:
        code = data.code.strip()
        if session.query(Unit.id).filter(Unit.code == code).first():
            raise ConflictError(f"Unit code '{code}' is already in use.")
        row.code = code
    if data.name is not None:
        row.name = data.name.strip()
    if "address" in data.model_fields_set:
        row.address = data.address or None
    session.commit()
    session.refresh(row)
    return unit_from_row(row)


def can_delete_unit(session: Session, unit_id: str) -> UnitDeleteCheck:
    """A unit can be deleted only when no vehicle and no user is assigned to it."""
    _get_row(session, unit_id)
    vehicle_count = session.query(Vehicle).filter(Vehicle.unit_id == unit_id).count()
    users_count = session.query(SystemUser).filter(SystemUser.unit_id == unit_id).count()
    return UnitDeleteCheck(
        can_delete=vehicle_count == 0 and users_count == 0,
        vehicle_count=vehicle_count,
        users_count=users_count,
    )


def delete_unit(session: Session, unit_id: str) -> None:
    check = can_delete_unit(session, unit_id)
    if not check.can_delete:
        raise BusinessRuleError(
            f"Unit still has {check.vehicle_count} vehicle(s) and {check.users_count} user(s) assigned."
        )
    session.query(Unit).filter(Unit.id == unit_id).delete(synchronize_session=False)
    session.commit()
    logger.info("Unit deleted", extra={"unit_id": unit_id})
