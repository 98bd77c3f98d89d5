"""Unit tests for yardtrack.services.units and yardtrack.services.vehicles with a mocked session."""

import unittest
from unittest.mock import MagicMock

from yardtrack.models import Unit, Vehicle
from yardtrack.schemas.units import UnitCreate
from yardtrack.schemas.vehicles import VehicleCreate, VehicleLocation, VehicleUpdate
from yardtrack.services import units as unit_service
from yardtrack.services import vehicles as vehicle_service
from yardtrack.services.errors import BusinessRuleError, ConflictError, NotFoundError


def _assign_id(obj: object) -> None:
    if getattr(obj, "id", None) is None:
        obj.id = "new-id"


class TestListUnits(unittest.TestCase):
    def test_attaches_counts_per_unit(self) -> None:
        session = MagicMock()
        session.query.return_value.order_by.return_value.all.return_value = [
            Unit(id="unit-1", name="North", code="N"),
            Unit(id="unit-2", name="South", code="S"),
        ]
        session.query.return_value.group_by.return_value.all.return_value = [
            ("unit-1", 3),
            (None, 5),
        ]
        units = unit_service.list_units(session)
        self.assertEqual([u.code for u in units], ["N", "S"])
        self.assertEqual(units[0].vehicle_count, 3)
        self.assertEqual(units[0].users_count, 3)
        self.assertEqual(units[1].vehicle_count, 0)


class TestCreateUnit(unittest.TestCase):
    def test_duplicate_code_raises_conflict(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = ("unit-1",)
        with self.assertRaises(ConflictError):
            unit_service.create_unit(session, UnitCreate(name="North", code="N"))
        session.add.assert_not_called()

    def test_creates_with_zero_counts(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = None
        session.refresh.side_effect = _assign_id
        unit = unit_service.create_unit(session, UnitCreate(name=" North ", code=" N "))
        self.assertEqual(unit.name, "North")
        self.assertEqual(unit.code, "N")
        self.assertEqual(unit.vehicle_count, 0)
        self.assertEqual(unit.users_count, 0)
        session.commit.assert_called_once()


class TestDeleteUnit(unittest.TestCase):
    def _session(self, assigned: int) -> MagicMock:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = Unit(
            id="unit-1", name="North", code="N"
        )
        session.query.return_value.filter.return_value.count.return_value = assigned
        return session

    def test_can_delete_when_nothing_assigned(self) -> None:
        check = unit_service.can_delete_unit(self._session(0), "unit-1")
        self.assertTrue(check.can_delete)

    def test_cannot_delete_with_assignments(self) -> None:
        check = unit_service.can_delete_unit(self._session(2), "unit-1")
        self.assertFalse(check.can_delete)
        self.assertEqual(check.vehicle_count, 2)
        self.assertEqual(check.users_count, 2)

    def test_delete_refused_with_assignments(self) -> None:
        session = self._session(1)
        with self.assertRaises(BusinessRuleError):
            unit_service.delete_unit(session, "unit-1")
        session.query.return_value.filter.return_value.delete.assert_not_called()
        session.commit.assert_not_called()

    def test_delete_when_empty(self) -> None:
        session = self._session(0)
        unit_service.delete_unit(session, "unit-1")
        session.query.return_value.filter.return_value.delete.assert_called_once()
        session.commit.assert_called_once()

    def test_unknown_unit_raises_not_found(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = None
        with self.assertRaises(NotFoundError):
            unit_service.can_delete_unit(session, "missing")


def _vehicle_create(**kwargs: object) -> VehicleCreate:
    data = {
        "plate": "abc-1234",
        "make": "Fiat",
        "model": "Strada",
        "color": "White",
        "year": 2022,
        "mileage": 100,
        "unit_id": "unit-1",
    }
    data.update(kwargs)
    return VehicleCreate(**data)


class TestCreateVehicle(unittest.TestCase):
    def test_normalizes_plate_and_parks_in_yard(self) -> None:
        session = MagicMock()
        # plate lookup finds nothing, unit lookup finds the unit
        session.query.return_value.filter.return_value.first.side_effect = [None, ("unit-1",)]
        session.refresh.side_effect = _assign_id
        vehicle = vehicle_service.create_vehicle(session, _vehicle_create())
        self.assertEqual(vehicle.plate, "ABC1234")
        self.assertEqual(vehicle.location, VehicleLocation.YARD)
        self.assertEqual(vehicle.mileage, 100)
        self.assertEqual(vehicle.mileage_label, "100 km")
        session.add.assert_called_once()

    def test_duplicate_plate_raises_conflict(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = ("v-1",)
        with self.assertRaises(ConflictError):
            vehicle_service.create_vehicle(session, _vehicle_create())

    def test_unknown_unit_raises_not_found(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.side_effect = [None, None]
        with self.assertRaises(NotFoundError):
            vehicle_service.create_vehicle(session, _vehicle_create())
        session.add.assert_not_called()

    def test_plate_of_only_separators_is_rejected(self) -> None:
        with self.assertRaises(BusinessRuleError):
            vehicle_service.create_vehicle(MagicMock(), _vehicle_create(plate="- -"))


class TestUpdateVehicle(unittest.TestCase):
    def test_updates_only_set_fields(self) -> None:
        row = Vehicle(
            id="v-1", plate="ABC1234", make="Fiat", model="Strada", color="White",
            year=2022, mileage=100, location="yard", unit_id="unit-1", photo_url="http://x/p.jpg",
        )
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = row
        vehicle = vehicle_service.update_vehicle(session, "v-1", VehicleUpdate(color="Black"))
        self.assertEqual(vehicle.color, "Black")
        self.assertEqual(vehicle.photo_url, "http://x/p.jpg")
        self.assertEqual(vehicle.make, "Fiat")

    def test_explicit_null_clears_photo(self) -> None:
        row = Vehicle(
            id="v-1", plate="ABC1234", make="Fiat", model="Strada", color="White",
            year=2022, mileage=100, location="yard", unit_id="unit-1", photo_url="http://x/p.jpg",
        )
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = row
        vehicle = vehicle_service.update_vehicle(session, "v-1", VehicleUpdate(photo_url=None))
        self.assertIsNone(vehicle.photo_url)


class TestDeleteVehicle(unittest.TestCase):
    def test_refused_when_movements_exist(self) -> None:
        row = Vehicle(id="v-1", plate="ABC1234")
        session = MagicMock()
        session.query.return_value.filter.return_value.first.side_effect = [row, ("m-1",)]
        with self.assertRaises(BusinessRuleError):
            vehicle_service.delete_vehicle(session, "v-1")
        session.delete.assert_not_called()

    def test_deletes_vehicle_without_history(self) -> None:
        row = Vehicle(id="v-1", plate="ABC1234")
        session = MagicMock()
        session.query.return_value.filter.return_value.first.side_effect = [row, None]
        vehicle_service.delete_vehicle(session, "v-1")
        session.delete.assert_called_once_with(row)
        session.commit.assert_called_once()
