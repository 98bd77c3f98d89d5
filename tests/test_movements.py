"""Unit tests for yardtrack.services.movements: create/finalize rules and vehicle location tracking."""

import unittest
from datetime import date, datetime, time
from unittest.mock import MagicMock

from yardtrack.models import Movement, Vehicle
from yardtrack.schemas.movements import MovementCreate, MovementFinalize, MovementType
from yardtrack.schemas.vehicles import VehicleLocation
from yardtrack.services.errors import BusinessRuleError, NotFoundError
from yardtrack.services.movements import (
    check_movement_allowed,
    create_movement,
    delete_movement,
    finalize_movement,
)


def _vehicle(location: str = "yard", mileage: int = 1000) -> Vehicle:
    return Vehicle(
        id="v-1",
        plate="ABC1234",
        make="Fiat",
        model="Strada",
        color="White",
        year=2022,
        mileage=mileage,
        location=location,
        unit_id="unit-1",
    )


def _create(movement_type: MovementType = MovementType.EXIT, initial_mileage: int = 1000) -> MovementCreate:
    return MovementCreate(
        vehicle_id="v-1",
        driver=" Carlos ",
        destination="Port",
        initial_mileage=initial_mileage,
        departure_unit_id="unit-1",
        type=movement_type,
    )


def _session_returning(row: object) -> MagicMock:
    """Session whose every query(...).filter(...).first() returns row; refresh assigns an id."""
    session = MagicMock()
    session.query.return_value.filter.return_value.first.return_value = row

    def _refresh(obj: object) -> None:
        if getattr(obj, "id", None) is None:
            obj.id = "m-new"

    session.refresh.side_effect = _refresh
    return session


class TestCheckMovementAllowed(unittest.TestCase):
    def test_exit_of_vehicle_already_out_is_rejected(self) -> None:
        with self.assertRaises(BusinessRuleError):
            check_movement_allowed(_vehicle(location="out"), _create(MovementType.EXIT))

    def test_entry_of_vehicle_in_yard_is_rejected(self) -> None:
        with self.assertRaises(BusinessRuleError):
            check_movement_allowed(_vehicle(location="yard"), _create(MovementType.ENTRY))

    def test_exit_mileage_below_vehicle_mileage_is_rejected(self) -> None:
        with self.assertRaises(BusinessRuleError) as ctx:
            check_movement_allowed(_vehicle(mileage=5000), _create(initial_mileage=4999))
        self.assertIn("4999", ctx.exception.message)

    def test_valid_exit_passes(self) -> None:
        check_movement_allowed(_vehicle(mileage=5000), _create(initial_mileage=5000))

    def test_initial_registration_is_allowed_in_yard(self) -> None:
        check_movement_allowed(_vehicle(location="yard"), _create(MovementType.INITIAL))


class TestCreateMovement(unittest.TestCase):
    def test_exit_marks_vehicle_out(self) -> None:
        vehicle = _vehicle()
        session = _session_returning(vehicle)
        now = datetime(2026, 3, 1, 8, 30, 15, 999)
        result = create_movement(session, _create(initial_mileage=1200), user_id="u-1", now=now)
        self.assertEqual(result.id, "m-new")
        self.assertEqual(result.status, VehicleLocation.OUT)
        self.assertEqual(result.type, MovementType.EXIT)
        self.assertEqual(result.driver, "Carlos")
        self.assertEqual(result.departure_date, date(2026, 3, 1))
        self.assertEqual(result.departure_time, time(8, 30, 15))
        self.assertEqual(result.created_by, "u-1")
        self.assertEqual(vehicle.location, "out")
        self.assertEqual(vehicle.mileage, 1200)
        session.add.assert_called_once()
        session.commit.assert_called_once()

    def test_entry_parks_vehicle_at_departure_unit(self) -> None:
        vehicle = _vehicle(location="out")
        session = _session_returning(vehicle)
        # vehicle lookup, open-exit lookup (none), unit lookup
        session.query.return_value.filter.return_value.first.side_effect = [vehicle, None, ("unit-2",)]
        data = _create(MovementType.ENTRY).model_copy(update={"departure_unit_id": "unit-2"})
        result = create_movement(session, data, user_id=None)
        self.assertEqual(result.status, VehicleLocation.YARD)
        self.assertEqual(vehicle.location, "yard")
        self.assertEqual(vehicle.unit_id, "unit-2")

    def test_entry_with_open_exit_is_rejected(self) -> None:
        vehicle = _vehicle(location="out")
        session = _session_returning(vehicle)
        session.query.return_value.filter.return_value.first.side_effect = [vehicle, ("m-open",)]
        with self.assertRaises(BusinessRuleError) as ctx:
            create_movement(session, _create(MovementType.ENTRY), user_id="u-1")
        self.assertIn("finalize", ctx.exception.message)
        session.add.assert_not_called()
        self.assertEqual(vehicle.location, "out")

    def test_explicit_departure_date_and_time_are_kept(self) -> None:
        session = _session_returning(_vehicle())
        data = _create().model_copy(
            update={"departure_date": date(2026, 2, 1), "departure_time": time(6, 0)}
        )
        result = create_movement(session, data, user_id="u-1", now=datetime(2026, 3, 1, 8, 0))
        self.assertEqual(result.departure_date, date(2026, 2, 1))
        self.assertEqual(result.departure_time, time(6, 0))

    def test_unknown_vehicle_raises_not_found(self) -> None:
        session = _session_returning(None)
        with self.assertRaises(NotFoundError):
            create_movement(session, _create(), user_id="u-1")
        session.add.assert_not_called()

    def test_rule_violation_does_not_write(self) -> None:
        session = _session_returning(_vehicle(location="out"))
        with self.assertRaises(BusinessRuleError):
            create_movement(session, _create(MovementType.EXIT), user_id="u-1")
        session.add.assert_not_called()
        session.commit.assert_not_called()


def _open_movement(vehicle: Vehicle) -> Movement:
    row = Movement(
        id="m-1",
        vehicle_id=vehicle.id,
        driver="Carlos",
        initial_mileage=1000,
        departure_unit_id="unit-1",
        departure_date=date(2026, 3, 1),
        departure_time=time(8, 0),
        status="out",
        type="exit",
    )
    row.vehicle = vehicle
    return row


def _finalize(final_mileage: int = 1150, arrival_time: time = time(10, 45)) -> MovementFinalize:
    return MovementFinalize(
        final_mileage=final_mileage,
        arrival_date=date(2026, 3, 1),
        arrival_time=arrival_time,
        arrival_unit_id="unit-2",
    )


class TestFinalizeMovement(unittest.TestCase):
    def test_computes_mileage_run_and_duration(self) -> None:
        vehicle = _vehicle(location="out")
        row = _open_movement(vehicle)
        session = _session_returning(row)
        result = finalize_movement(session, "m-1", _finalize())
        self.assertEqual(result.mileage_run, 150)
        self.assertEqual(result.duration, "02:45")
        self.assertEqual(result.status, VehicleLocation.YARD)
        self.assertEqual(result.type, MovementType.ENTRY)
        self.assertEqual(result.vehicle_plate, "ABC1234")
        self.assertEqual(result.vehicle_name, "Fiat Strada")
        self.assertEqual(vehicle.location, "yard")
        self.assertEqual(vehicle.mileage, 1150)
        self.assertEqual(vehicle.unit_id, "unit-2")
        session.commit.assert_called_once()

    def test_final_mileage_must_exceed_initial(self) -> None:
        row = _open_movement(_vehicle(location="out"))
        session = _session_returning(row)
        with self.assertRaises(BusinessRuleError):
            finalize_movement(session, "m-1", _finalize(final_mileage=1000))
        session.commit.assert_not_called()

    def test_already_finalized_is_rejected(self) -> None:
        row = _open_movement(_vehicle())
        row.status = "yard"
        session = _session_returning(row)
        with self.assertRaises(BusinessRuleError):
            finalize_movement(session, "m-1", _finalize())

    def test_arrival_before_departure_is_rejected(self) -> None:
        row = _open_movement(_vehicle(location="out"))
        session = _session_returning(row)
        with self.assertRaises(BusinessRuleError):
            finalize_movement(session, "m-1", _finalize(arrival_time=time(7, 0)))
        self.assertIsNone(row.final_mileage)

    def test_unknown_movement_raises_not_found(self) -> None:
        session = _session_returning(None)
        with self.assertRaises(NotFoundError):
            finalize_movement(session, "missing", _finalize())


class TestDeleteMovement(unittest.TestCase):
    def test_deletes_existing(self) -> None:
        row = _open_movement(_vehicle())
        session = _session_returning(row)
        delete_movement(session, "m-1")
        session.delete.assert_called_once_with(row)
        session.commit.assert_called_once()

    def test_unknown_movement_raises_not_found(self) -> None:
        session = _session_returning(None)
        with self.assertRaises(NotFoundError):
            delete_movement(session, "missing")
