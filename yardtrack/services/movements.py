"""Movements: register vehicle exits/entries and finalize trips, keeping the vehicle's location in step.

Rules on create:
- exit of a vehicle already out, or entry of a vehicle already in the yard, is rejected;
- an exit's initial mileage may not be below the vehicle's current mileage;
- an entry is rejected while the vehicle has an open exit (finalize that one instead).

Finalize closes an open (out) movement: final mileage must exceed the initial one, the
trip length and HH:MM duration are computed, and the vehicle returns to the arrival unit's yard.
"""

import logging
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from yardtrack.models import Movement, Unit, Vehicle
from yardtrack.schemas.movements import Movement as MovementOut
from yardtrack.schemas.movements import MovementCreate, MovementFinalize, MovementType
from yardtrack.schemas.vehicles import VehicleLocation
from yardtrack.services.errors import BusinessRuleError, NotFoundError
from yardtrack.services.formatting import duration_between, normalize_plate
from yardtrack.services.vehicles import get_vehicle_row

logger = logging.getLogger(__name__)

MAX_SEARCH_TERM_LENGTH = 100


def movement_from_row(row: Movement) -> MovementOut:
    vehicle = row.vehicle
    return MovementOut(
        id=row.id,
        vehicle_id=row.vehicle_id,
        vehicle_plate=vehicle.plate if vehicle is not None else None,
        vehicle_name=f"{vehicle.make} {vehicle.model}" if vehicle is not None else None,
        photo_url=vehicle.photo_url if vehicle is not None else None,
        driver=row.driver,
        destination=row.destination,
        initial_mileage=row.initial_mileage,
        final_mileage=row.final_mileage,
        mileage_run=row.mileage_run,
        departure_unit_id=row.departure_unit_id,
        departure_unit_name=row.departure_unit.name if row.departure_unit is not None else None,
        departure_date=row.departure_date,
        departure_time=row.departure_time,
        arrival_unit_id=row.arrival_unit_id,
        arrival_unit_name=row.arrival_unit.name if row.arrival_unit is not None else None,
        arrival_date=row.arrival_date,
        arrival_time=row.arrival_time,
        duration=row.duration,
        status=row.status,
        type=row.type,
        created_by=row.created_by,
    )


def _ordered(query):
    return query.order_by(
        Movement.departure_date.desc(),
        Movement.departure_time.desc(),
        Movement.created_at.desc(),
    )


def _get_row(session: Session, movement_id: str) -> Movement:
    row = session.query(Movement).filter(Movement.id == movement_id).first()
    if row is None:
        raise NotFoundError("Movement not found.")
    return row


def _ensure_unit_exists(session: Session, unit_id: str) -> None:
    if session.query(Unit.id).filter(Unit.id == unit_id).first() is None:
        raise NotFoundError("Unit not found.")


def list_movements(session: Session) -> list[MovementOut]:
    """All movements, newest departure first."""
    return [movement_from_row(r) for r in _ordered(session.query(Movement)).all()]


def get_movement(session: Session, movement_id: str) -> MovementOut | None:
    row = session.query(Movement).filter(Movement.id == movement_id).first()
    return movement_from_row(row) if row is not None else None


def list_movements_by_vehicle(session: Session, vehicle_id: str) -> list[MovementOut]:
    query = session.query(Movement).filter(Movement.vehicle_id == vehicle_id)
    return [movement_from_row(r) for r in _ordered(query).all()]


def list_movements_by_status(session: Session, status: VehicleLocation) -> list[MovementOut]:
    query = session.query(Movement).filter(Movement.status == status.value)
    return [movement_from_row(r) for r in _ordered(query).all()]


def search_movements(session: Session, term: str | None) -> list[MovementOut]:
    """Case-insensitive search over driver, destination and vehicle plate. Empty term lists all."""
    term = (term or "").strip()[:MAX_SEARCH_TERM_LENGTH]
    if not term:
        return list_movements(session)
    pattern = f"%{term}%"
    plate_pattern = f"%{normalize_plate(term)}%"
    query = (
        session.query(Movement)
        .join(Vehicle, Movement.vehicle_id == Vehicle.id)
        .filter(
            or_(
                Movement.driver.ilike(pattern),
                Movement.destination.ilike(pattern),
                Vehicle.plate.ilike(plate_pattern),
            )
        )
    )
    return [movement_from_row(r) for r in _ordered(query).all()]


def _open_exit_id(session: Session, vehicle_id: str) -> str | None:
    row = (
        session.query(Movement.id)
        .filter(
            Movement.vehicle_id == vehicle_id,
            Movement.status == VehicleLocation.OUT.value,
        )
        .first()
    )
    return row[0] if row is not None else None


def check_movement_allowed(vehicle: Vehicle, data: MovementCreate) -> None:
    """Raise BusinessRuleError if data is incompatible with the vehicle's current state."""
    if data.type == MovementType.EXIT and vehicle.location == VehicleLocation.OUT.value:
        raise BusinessRuleError("Vehicle is already out.")
    if data.type == MovementType.ENTRY and vehicle.location == VehicleLocation.YARD.value:
        raise BusinessRuleError("Vehicle is already in the yard.")
    if data.type == MovementType.EXIT and data.initial_mileage < vehicle.mileage:
        raise BusinessRuleError(
            f"Initial mileage ({data.initial_mileage}) cannot be lower than the "
            f"vehicle's current mileage ({vehicle.mileage})."
        )


def create_movement(
    session: Session,
    data: MovementCreate,
    user_id: str | None,
    now: datetime | None = None,
) -> MovementOut:
    """Register a movement for a vehicle and move the vehicle to the matching location."""
    vehicle = get_vehicle_row(session, data.vehicle_id)
    check_movement_allowed(vehicle, data)
    if data.type == MovementType.ENTRY and _open_exit_id(session, vehicle.id) is not None:
        raise BusinessRuleError("Vehicle has an open exit; finalize that movement to register its return.")
    _ensure_unit_exists(session, data.departure_unit_id)

    now = now or datetime.now()
    status = VehicleLocation.OUT if data.type == MovementType.EXIT else VehicleLocation.YARD
    row = Movement(
        vehicle_id=vehicle.id,
        driver=data.driver.strip(),
        destination=data.destination or None,
        initial_mileage=data.initial_mileage,
        departure_unit_id=data.departure_unit_id,
        departure_date=data.departure_date or now.date(),
        departure_time=data.departure_time or now.time().replace(microsecond=0),
        type=data.type.value,
        status=status.value,
        created_by=user_id,
    )
    session.add(row)

    vehicle.location = status.value
    if data.initial_mileage > vehicle.mileage:
        vehicle.mileage = data.initial_mileage
    if status == VehicleLocation.YARD:
        vehicle.unit_id = data.departure_unit_id

    session.commit()
    session.refresh(row)
    logger.info(
        "Movement created",
        extra={
            "movement_id": row.id,
            "vehicle_id": vehicle.id,
            "movement_type": row.type,
            "created_by": user_id,
        },
    )
    return movement_from_row(row)


def finalize_movement(session: Session, movement_id: str, data: MovementFinalize) -> MovementOut:
    """Close an open movement: record arrival, mileage run and duration; park the vehicle."""
    row = _get_row(session, movement_id)
    if row.status == VehicleLocation.YARD.value:
        raise BusinessRuleError("This movement is already finalized.")
    if data.final_mileage <= row.initial_mileage:
        raise BusinessRuleError(
            f"Final mileage ({data.final_mileage}) must be greater than the "
            f"initial mileage ({row.initial_mileage})."
        )
    _ensure_unit_exists(session, data.arrival_unit_id)
    try:
        duration = duration_between(
            row.departure_date, row.departure_time, data.arrival_date, data.arrival_time
        )
    except ValueError as e:
        raise BusinessRuleError("Arrival cannot be before departure.") from e

    row.final_mileage = data.final_mileage
    row.mileage_run = data.final_mileage - row.initial_mileage
    row.arrival_date = data.arrival_date
    row.arrival_time = data.arrival_time
    row.arrival_unit_id = data.arrival_unit_id
    row.duration = duration
    row.status = VehicleLocation.YARD.value
    row.type = MovementType.ENTRY.value

    vehicle = row.vehicle
    if vehicle is not None:
        vehicle.location = VehicleLocation.YARD.value
        vehicle.mileage = max(vehicle.mileage, data.final_mileage)
        vehicle.unit_id = data.arrival_unit_id

    session.commit()
    session.refresh(row)
    logger.info(
        "Movement finalized",
        extra={"movement_id": row.id, "mileage_run": row.mileage_run, "duration": duration},
    )
    return movement_from_row(row)


def delete_movement(session: Session, movement_id: str) -> None:
    row = _get_row(session, movement_id)
    session.delete(row)
    session.commit()
    logger.info("Movement deleted", extra={"movement_id": movement_id})
