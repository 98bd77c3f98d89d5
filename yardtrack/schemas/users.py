"""Pydantic schemas for system users: raw database records, mapped entities, and permission sets."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from yardtrack.schemas.base import CamelModel

ADMIN_ROLE = "admin"

# Permission flag names shared by raw records, overrides and patches.
PERMISSION_FIELDS: tuple[str, ...] = (
    "can_view_vehicles",
    "can_edit_vehicles",
    "can_view_units",
    "can_edit_units",
    "can_view_users",
    "can_edit_users",
    "can_view_movements",
    "can_edit_movements",
    "can_switch_units",
)


class UserRole(str, Enum):
    """Known roles. Any value other than admin is treated as the general (non-admin) case."""

    ADMIN = "admin"
    OPERATOR = "operator"


class UserShift(str, Enum):
    DAY = "day"
    NIGHT = "night"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


# --- Raw records (database shape, snake_case, loosely typed) ---


class RawUnitRef(BaseModel):
    """Embedded `units(name)` relation on a user row."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None


class RawPermissionsRecord(BaseModel):
    """One row of system_user_permissions. Missing flags stay None (no override)."""

    model_config = ConfigDict(extra="ignore")

    can_view_vehicles: bool | None = None
    can_edit_vehicles: bool | None = None
    can_view_units: bool | None = None
    can_edit_units: bool | None = None
    can_view_users: bool | None = None
    can_edit_users: bool | None = None
    can_view_movements: bool | None = None
    can_edit_movements: bool | None = None
    can_switch_units: bool | None = None


class RawUserRecord(BaseModel):
    """
    A system_users row with its embedded relations, as handed over by the repository layer.

    Only `id` is required; everything else maps to None when absent.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    name: str | None = None
    username: str | None = None
    email: str | None = None
    role: str | None = None
    shift: str | None = None
    status: str | None = None
    unit_id: str | None = None
    units: RawUnitRef | None = None
    # Rows stay unvalidated here; only the first one is ever mapped.
    system_user_permissions: list[Any] | None = None


# --- Application entities ---


class UserPermissions(CamelModel):
    """Explicit per-user override set. None means no override for that capability."""

    model_config = ConfigDict(frozen=True)

    can_view_vehicles: bool | None = None
    can_edit_vehicles: bool | None = None
    can_view_units: bool | None = None
    can_edit_units: bool | None = None
    can_view_users: bool | None = None
    can_edit_users: bool | None = None
    can_view_movements: bool | None = None
    can_edit_movements: bool | None = None
    can_switch_units: bool | None = None


class SystemUser(CamelModel):
    """Authenticated operator as seen by the application. Immutable snapshot per request."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str | None = None
    username: str | None = None
    email: str | None = None
    role: str | None = None
    shift: str | None = None
    status: str | None = None
    unit_id: str | None = None
    unit_name: str | None = None
    permissions: UserPermissions | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value


class EffectivePermissions(CamelModel):
    """Fully resolved capability set consumed by route guards and the UI. Never contains None."""

    model_config = ConfigDict(frozen=True)

    can_view_vehicles: bool
    can_edit_vehicles: bool
    can_view_movements: bool
    can_edit_movements: bool
    can_create_movements: bool
    can_view_users: bool
    can_edit_users: bool
    can_view_units: bool
    can_edit_units: bool


# --- Request/response bodies ---


class UserPermissionsPatch(CamelModel):
    """Partial permissions update. Only fields that are set (not None) are written back."""

    can_view_vehicles: bool | None = None
    can_edit_vehicles: bool | None = None
    can_view_units: bool | None = None
    can_edit_units: bool | None = None
    can_view_users: bool | None = None
    can_edit_users: bool | None = None
    can_view_movements: bool | None = None
    can_edit_movements: bool | None = None
    can_switch_units: bool | None = None


class UserCreate(CamelModel):
    """Body for creating a user."""

    name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    email: str | None = Field(default=None, max_length=255)
    role: UserRole = UserRole.OPERATOR
    shift: UserShift = UserShift.DAY
    unit_id: str | None = None
    permissions: UserPermissionsPatch | None = None


class UserUpdate(CamelModel):
    """Body for updating a user; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    username: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    role: UserRole | None = None
    shift: UserShift | None = None
    unit_id: str | None = None
    permissions: UserPermissionsPatch | None = None


class UserStatusUpdate(CamelModel):
    status: UserStatus


class PasswordChange(CamelModel):
    new_password: str = Field(..., min_length=6, max_length=128)


class UsersListResponse(CamelModel):
    users: list[SystemUser]
