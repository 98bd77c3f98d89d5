"""Unit tests for yardtrack.services.permissions: override -> role -> fixed policy resolution."""

import unittest

from yardtrack.schemas.users import (
    PERMISSION_FIELDS,
    EffectivePermissions,
    SystemUser,
    UserPermissions,
)
from yardtrack.services.permissions import (
    CAN_CREATE_MOVEMENTS_POLICY,
    CAN_VIEW_MOVEMENTS_POLICY,
    RESOLVED_CAPABILITIES,
    can_switch_units,
    has_permission,
    resolve_capability,
    resolve_permissions,
)
from yardtrack.services.user_mapper import map_user_with_permissions


def _user(role: str | None = "operator", permissions: UserPermissions | None = None) -> SystemUser:
    return SystemUser(id="u-1", role=role, status="active", permissions=permissions)


class TestResolveCapability(unittest.TestCase):
    def test_true_override_beats_role(self) -> None:
        self.assertTrue(resolve_capability(UserPermissions(can_edit_users=True), "can_edit_users", False))

    def test_false_override_beats_admin(self) -> None:
        self.assertFalse(resolve_capability(UserPermissions(can_edit_users=False), "can_edit_users", True))

    def test_none_override_falls_back_to_role(self) -> None:
        self.assertTrue(resolve_capability(UserPermissions(), "can_edit_users", True))
        self.assertFalse(resolve_capability(UserPermissions(), "can_edit_users", False))

    def test_no_permissions_record_falls_back_to_role(self) -> None:
        self.assertTrue(resolve_capability(None, "can_view_units", True))
        self.assertFalse(resolve_capability(None, "can_view_units", False))


class TestResolvePermissions(unittest.TestCase):
    def test_no_user_gives_none(self) -> None:
        self.assertIsNone(resolve_permissions(None))

    def test_admin_without_overrides_gets_everything(self) -> None:
        perms = resolve_permissions(_user(role="admin"))
        for name in EffectivePermissions.model_fields:
            with self.subTest(capability=name):
                self.assertTrue(getattr(perms, name))

    def test_operator_without_overrides_gets_only_movement_policies(self) -> None:
        perms = resolve_permissions(_user(role="operator"))
        for name in RESOLVED_CAPABILITIES:
            with self.subTest(capability=name):
                self.assertFalse(getattr(perms, name))
        self.assertEqual(perms.can_view_movements, CAN_VIEW_MOVEMENTS_POLICY)
        self.assertEqual(perms.can_create_movements, CAN_CREATE_MOVEMENTS_POLICY)

    def test_unknown_role_is_treated_as_non_admin(self) -> None:
        perms = resolve_permissions(_user(role=None))
        self.assertFalse(perms.can_edit_vehicles)

    def test_operator_override_grants_capability(self) -> None:
        perms = resolve_permissions(
            _user(permissions=UserPermissions(can_view_vehicles=True, can_edit_movements=True))
        )
        self.assertTrue(perms.can_view_vehicles)
        self.assertTrue(perms.can_edit_movements)
        self.assertFalse(perms.can_edit_vehicles)

    def test_admin_false_override_revokes_capability(self) -> None:
        perms = resolve_permissions(
            _user(role="admin", permissions=UserPermissions(can_edit_users=False))
        )
        self.assertFalse(perms.can_edit_users)
        self.assertTrue(perms.can_view_users)

    def test_movement_policies_ignore_overrides(self) -> None:
        perms = resolve_permissions(
            _user(role="admin", permissions=UserPermissions(can_view_movements=False))
        )
        self.assertTrue(perms.can_view_movements)
        self.assertTrue(perms.can_create_movements)

    def test_result_has_no_none_values(self) -> None:
        perms = resolve_permissions(_user(permissions=UserPermissions(can_view_units=None)))
        for name, value in perms.model_dump().items():
            with self.subTest(capability=name):
                self.assertIsInstance(value, bool)

    def test_resolution_is_deterministic(self) -> None:
        user = _user(permissions=UserPermissions(can_edit_units=True))
        self.assertEqual(resolve_permissions(user), resolve_permissions(user))


class TestCanSwitchUnits(unittest.TestCase):
    def test_admin_can_switch(self) -> None:
        self.assertTrue(can_switch_units(_user(role="admin")))

    def test_operator_cannot_switch_by_default(self) -> None:
        self.assertFalse(can_switch_units(_user()))

    def test_operator_with_override_can_switch(self) -> None:
        self.assertTrue(can_switch_units(_user(permissions=UserPermissions(can_switch_units=True))))

    def test_no_user_cannot_switch(self) -> None:
        self.assertFalse(can_switch_units(None))


class TestHasPermission(unittest.TestCase):
    def test_reads_resolved_capability(self) -> None:
        perms = resolve_permissions(_user(role="admin"))
        self.assertTrue(has_permission(perms, "can_edit_units"))

    def test_denied_capability(self) -> None:
        perms = resolve_permissions(_user())
        self.assertFalse(has_permission(perms, "can_edit_units"))

    def test_no_permission_set_denies(self) -> None:
        self.assertFalse(has_permission(None, "can_view_movements"))

    def test_unknown_capability_raises(self) -> None:
        perms = resolve_permissions(_user())
        with self.assertRaises(AttributeError):
            has_permission(perms, "can_fly")


def _raw_user(role: str, permission_rows: list[dict] | None = None) -> dict:
    """Raw system_users record as produced by the data layer."""
    return {
        "id": "u-1",
        "username": "ana",
        "role": role,
        "status": "active",
        "unit_id": "unit-1",
        "units": {"name": "North Yard"},
        "system_user_permissions": permission_rows,
    }


class TestResolveFromRawRecords(unittest.TestCase):
    """Resolution of users mapped from raw records, checked for every resolved capability."""

    def _resolve(self, raw: dict) -> EffectivePermissions:
        return resolve_permissions(map_user_with_permissions(raw))

    def test_admin_without_overrides_gets_every_capability(self) -> None:
        perms = self._resolve(_raw_user("admin"))
        for name in RESOLVED_CAPABILITIES:
            with self.subTest(capability=name):
                self.assertIs(getattr(perms, name), True)
        self.assertIs(perms.can_view_movements, True)
        self.assertIs(perms.can_create_movements, True)

    def test_operator_without_overrides_gets_only_movement_policies(self) -> None:
        for rows in (None, [], [{}]):
            perms = self._resolve(_raw_user("operator", rows))
            for name in RESOLVED_CAPABILITIES:
                with self.subTest(rows=rows, capability=name):
                    self.assertIs(getattr(perms, name), False)
            self.assertIs(perms.can_view_movements, True)
            self.assertIs(perms.can_create_movements, True)

    def test_admin_with_every_flag_false_loses_every_resolved_capability(self) -> None:
        row = {name: False for name in PERMISSION_FIELDS}
        perms = self._resolve(_raw_user("admin", [row]))
        for name in RESOLVED_CAPABILITIES:
            with self.subTest(capability=name):
                self.assertIs(getattr(perms, name), False)
        self.assertIs(perms.can_view_movements, True)
        self.assertIs(perms.can_create_movements, True)

    def test_operator_with_every_flag_true_gains_every_resolved_capability(self) -> None:
        row = {name: True for name in PERMISSION_FIELDS}
        perms = self._resolve(_raw_user("operator", [row]))
        for name in RESOLVED_CAPABILITIES:
            with self.subTest(capability=name):
                self.assertIs(getattr(perms, name), True)
