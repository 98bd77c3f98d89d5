"""Pydantic request/response schemas."""

from yardtrack.schemas.auth import (
    CurrentUserResponse,
    LoginRequest,
    SwitchUnitRequest,
    TokenResponse,
)
from yardtrack.schemas.health import HealthResponse
from yardtrack.schemas.movements import (
    Movement,
    MovementCreate,
    MovementFinalize,
    MovementType,
)
from yardtrack.schemas.units import Unit, UnitCreate, UnitDeleteCheck, UnitUpdate
from yardtrack.schemas.users import (
    EffectivePermissions,
    RawPermissionsRecord,
    RawUserRecord,
    SystemUser,
    UserPermissions,
    UserRole,
    UserShift,
    UserStatus,
)
from yardtrack.schemas.vehicles import Vehicle, VehicleCreate, VehicleLocation, VehicleUpdate

__all__ = [
    "CurrentUserResponse",
    "EffectivePermissions",
    "HealthResponse",
    "LoginRequest",
    "Movement",
    "MovementCreate",
    "MovementFinalize",
    "MovementType",
    "RawPermissionsRecord",
    "RawUserRecord",
    "SwitchUnitRequest",
    "SystemUser",
    "TokenResponse",
    "Unit",
    "UnitCreate",
    "UnitDeleteCheck",
    "UnitUpdate",
    "UserPermissions",
    "UserRole",
    "UserShift",
    "UserStatus",
    "Vehicle",
    "VehicleCreate",
    "VehicleLocation",
    "VehicleUpdate",
]
