"""Vehicles: lookups, search, and CRUD with unique (normalized) plates."""

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from yardtrack.models import Movement, Unit, Vehicle
from yardtrack.schemas.vehicles import Vehicle as VehicleOut
from yardtrack.schemas.vehicles import VehicleCreate, VehicleLocation, VehicleUpdate
from yardtrack.services.errors import BusinessRuleError, ConflictError, NotFoundError
from yardtrack.services.formatting import format_mileage, normalize_plate

logger = logging.getLogger(__name__)

MAX_SEARCH_TERM_LENGTH = 100


def vehicle_from_row(row: Vehicle) -> VehicleOut:
    return VehicleOut(
        id=row.id,
        plate=row.plate,
        make=row.make,
        model=row.model,
        color=row.color,
        year=row.year,
        mileage=row.mileage,
        mileage_label=format_mileage(row.mileage),
        photo_url=row.photo_url,
        location=row.location,
        unit_id=row.unit_id,
        unit_name=row.unit.name if row.unit is not None else None,
    )


def _ensure_unit_exists(session: Session, unit_id: str) -> None:
    if session.query(Unit.id).filter(Unit.id == unit_id).first() is None:
        raise NotFoundError("Unit not found.")


def get_vehicle_row(session: Session, vehicle_id: str) -> Vehicle:
    row = session.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if row is None:
        raise NotFoundError("Vehicle not found.")
    return row


def list_vehicles(
    session: Session,
    unit_id: str | None = None,
    location: VehicleLocation | None = None,
) -> list[VehicleOut]:
    """All vehicles ordered by plate, optionally filtered by unit and/or location."""
    query = session.query(Vehicle)
    if unit_id is not None:
        query = query.filter(Vehicle.unit_id == unit_id)
    if location is not None:
        query = query.filter(Vehicle.location == location.value)
    return [vehicle_from_row(r) for r in query.order_by(Vehicle.plate).all()]


def get_vehicle(session: Session, vehicle_id: str) -> VehicleOut | None:
    row = session.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    return vehicle_from_row(row) if row is not None else None


def get_vehicle_by_plate(session: Session, plate: str) -> VehicleOut | None:
    row = session.query(Vehicle).filter(Vehicle.plate == normalize_plate(plate)).first()
    return vehicle_from_row(row) if row is not None else None


def search_vehicles(session: Session, term: str | None) -> list[VehicleOut]:
    """Case-insensitive substring search over plate, make, model and color. Empty term lists all."""
    term = (term or "").strip()[:MAX_SEARCH_TERM_LENGTH]
    if not term:
        return list_vehicles(session)
    pattern = f"%{term}%"
    rows = (
        session.query(Vehicle)
        .filter(
            or_(
                Vehicle.plate.ilike(pattern),
                Vehicle.make.ilike(pattern),
                Vehicle.model.ilike(pattern),
                Vehicle.color.ilike(pattern),
            )
        )
        .order_by(Vehicle.plate)
        .all()
    )
    return [vehicle_from_row(r) for r in rows]


def create_vehicle(session: Session, data: VehicleCreate) -> VehicleOut:
    plate = normalize_plate(data.plate)
    if not plate:
        raise BusinessRuleError("Plate must not be empty.")
    if session.query(Vehicle.id).filter(Vehicle.plate == plate).first():
        raise ConflictError(f"A vehicle with plate '{plate}' already exists.")
    _ensure_unit_exists(session, data.unit_id)
    row = Vehicle(
        plate=plate,
        make=data.make.strip(),
        model=data.model.strip(),
        color=data.color.strip(),
        year=data.year,
        mileage=data.mileage,
        photo_url=data.photo_url or None,
        location=VehicleLocation.YARD.value,
        unit_id=data.unit_id,
    )
    session.add(row)
    session.commit()
    session.refresh(row)
    logger.info("Vehicle created", extra={"vehicle_id": row.id, "plate": plate})
    return vehicle_from_row(row)


def update_vehicle(session: Session, vehicle_id: str, data: VehicleUpdate) -> VehicleOut:
    row = get_vehicle_row(session, vehicle_id)
    if data.plate is not None:
        plate = normalize_plate(data.plate)
        if not plate:
            raise BusinessRuleError("Plate must not be empty.")
        if plate != row.plate:
            if session.query(Vehicle.id).filter(Vehicle.plate == plate).first():
                raise ConflictError(f"A vehicle with plate '{plate}' already exists.")
            row.plate = plate
    if data.make is not None:
        row.make = data.make.strip()
    if data.model is not None:
        row.model = data.model.strip()
    if data.color is not None:
        row.color = data.color.strip()
    if data.year is not None:
        row.year = data.year
    if data.mileage is not None:
        row.mileage = data.mileage
    if "photo_url" in data.model_fields_set:
        row.photo_url = data.photo_url or None
    if data.unit_id is not None:
        _ensure_unit_exists(session, data.unit_id)
        row.unit_id = data.unit_id
    session.commit()
    session.refresh(row)
    return vehicle_from_row(row)


def delete_vehicle(session: Session, vehicle_id: str) -> None:
    """Delete a vehicle that has no movement history."""
    row = get_vehicle_row(session, vehicle_id)
    if session.query(Movement.id).filter(Movement.vehicle_id == vehicle_id).first():
        raise BusinessRuleError("Vehicle has movements and cannot be deleted.")
    session.delete(row)
    session.commit()
    logger.info("Vehicle deleted", extra={"vehicle_id": vehicle_id})
