"""User management: lookups through the entity mapper, authentication, CRUD, and permission overrides."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from yardtrack.core.security import hash_password, password_length_ok, verify_password
from yardtrack.models import SystemUser as SystemUserRow
from yardtrack.models import SystemUserPermissions, Unit
from yardtrack.schemas.users import (
    PERMISSION_FIELDS,
    SystemUser,
    UserCreate,
    UserPermissions,
    UserPermissionsPatch,
    UserStatus,
    UserUpdate,
)
from yardtrack.services.errors import (
    AuthenticationError,
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)
from yardtrack.services.permissions import can_switch_units
from yardtrack.services.user_mapper import (
    map_permissions,
    map_user_with_permissions,
    permissions_to_row,
)

logger = logging.getLogger(__name__)

# Overrides written for a new user when the request carries none.
DEFAULT_NEW_USER_PERMISSIONS: dict[str, bool] = {
    "can_view_vehicles": True,
    "can_edit_vehicles": False,
    "can_view_units": False,
    "can_edit_units": False,
    "can_view_users": False,
    "can_edit_users": False,
    "can_view_movements": True,
    "can_edit_movements": False,
}

INVALID_CREDENTIALS = "Invalid username or password."


def _permissions_to_record(row: SystemUserPermissions) -> dict[str, Any]:
    return {name: getattr(row, name) for name in PERMISSION_FIELDS}


def user_to_record(row: SystemUserRow) -> dict[str, Any]:
    """Serialize a system_users row with its unit and permission rows into the raw record shape."""
    return {
        "id": row.id,
        "name": row.name,
        "username": row.username,
        "email": row.email,
        "role": row.role,
        "shift": row.shift,
        "status": row.status,
        "unit_id": row.unit_id,
        "units": {"name": row.unit.name} if row.unit is not None else None,
        "system_user_permissions": [_permissions_to_record(p) for p in row.permissions],
    }


def _to_user(row: SystemUserRow) -> SystemUser:
    return map_user_with_permissions(user_to_record(row))


def _get_row(session: Session, user_id: str) -> SystemUserRow:
    row = session.query(SystemUserRow).filter(SystemUserRow.id == user_id).first()
    if row is None:
        raise NotFoundError("User not found.")
    return row


def _ensure_unit_exists(session: Session, unit_id: str | None) -> None:
    if unit_id is None:
        return
    if session.query(Unit.id).filter(Unit.id == unit_id).first() is None:
        raise NotFoundError("Unit not found.")


def list_users(session: Session) -> list[SystemUser]:
    rows = session.query(SystemUserRow).order_by(SystemUserRow.name).all()
    return [_to_user(r) for r in rows]


def get_user(session: Session, user_id: str) -> SystemUser | None:
    row = session.query(SystemUserRow).filter(SystemUserRow.id == user_id).first()
    return _to_user(row) if row is not None else None


def get_user_by_username(session: Session, username: str) -> SystemUser | None:
    row = session.query(SystemUserRow).filter(SystemUserRow.username == username).first()
    return _to_user(row) if row is not None else None


def list_users_by_unit(session: Session, unit_id: str) -> list[SystemUser]:
    rows = (
        session.query(SystemUserRow)
        .filter(SystemUserRow.unit_id == unit_id)
        .order_by(SystemUserRow.name)
        .all()
    )
    return [_to_user(r) for r in rows]


def authenticate(session: Session, username: str, password: str) -> SystemUser:
    """
    Verify credentials and return the mapped user.

    Raises AuthenticationError for unknown users, wrong passwords and inactive accounts
    (same message for all three so usernames cannot be enumerated).
    """
    row = session.query(SystemUserRow).filter(SystemUserRow.username == username).first()
    if row is None or not verify_password(password, row.password_hash):
        logger.info("Login failed", extra={"username": username, "reason": "credentials"})
        raise AuthenticationError(INVALID_CREDENTIALS)
    if row.status != UserStatus.ACTIVE.value:
        logger.info("Login failed", extra={"username": username, "reason": "inactive"})
        raise AuthenticationError(INVALID_CREDENTIALS)
    return _to_user(row)


def create_user(session: Session, data: UserCreate) -> SystemUser:
    """Create a user and its permission row (request overrides, or the defaults)."""
    username = data.username.strip()
    if session.query(SystemUserRow.id).filter(SystemUserRow.username == username).first():
        raise ConflictError(f"Username '{username}' is already in use.")
    if not password_length_ok(data.password):
        raise BusinessRuleError("Password length is out of range.")
    _ensure_unit_exists(session, data.unit_id)

    row = SystemUserRow(
        name=data.name.strip(),
        username=username,
        email=data.email or None,
        password_hash=hash_password(data.password),
        role=data.role.value,
        shift=data.shift.value,
        status=UserStatus.ACTIVE.value,
        unit_id=data.unit_id,
    )
    if data.permissions is not None:
        flags = {name: False for name in DEFAULT_NEW_USER_PERMISSIONS}
        flags["can_view_movements"] = True
        flags.update(permissions_to_row(data.permissions))
    else:
        flags = dict(DEFAULT_NEW_USER_PERMISSIONS)
    row.permissions.append(SystemUserPermissions(**flags))
    session.add(row)
    session.commit()
    session.refresh(row)
    logger.info("User created", extra={"user_id": row.id, "role": row.role})
    return _to_user(row)


def update_user(session: Session, user_id: str, data: UserUpdate) -> SystemUser:
    """Apply the fields set on data; a new username must stay unique."""
    row = _get_row(session, user_id)
    if data.username is not None and data.username.strip() != row.username:
        username = data.username.strip()
        if session.query(SystemUserRow.id).filter(SystemUserRow.username == username).first():
            raise ConflictError(f"Username '{username}' is already in use.")
        row.username = username
    if data.name is not None:
        row.name = data.name.strip()
    if "email" in data.model_fields_set:
        row.email = data.email or None
    if data.role is not None:
        row.role = data.role.value
    if data.shift is not None:
        row.shift = data.shift.value
    if data.unit_id is not None:
        _ensure_unit_exists(session, data.unit_id)
        row.unit_id = data.unit_id
    if data.permissions is not None:
        _apply_permissions(row, data.permissions)
    session.commit()
    session.refresh(row)
    return _to_user(row)


def change_password(session: Session, user_id: str, new_password: str) -> None:
    row = _get_row(session, user_id)
    if not password_length_ok(new_password):
        raise BusinessRuleError("Password length is out of range.")
    row.password_hash = hash_password(new_password)
    session.commit()


def set_status(session: Session, user_id: str, status: UserStatus) -> SystemUser:
    """Activate or deactivate a user."""
    row = _get_row(session, user_id)
    row.status = status.value
    session.commit()
    session.refresh(row)
    logger.info("User status changed", extra={"user_id": user_id, "status": status.value})
    return _to_user(row)


def delete_user(session: Session, user_id: str) -> None:
    row = _get_row(session, user_id)
    session.delete(row)
    session.commit()
    logger.info("User deleted", extra={"user_id": user_id})


def get_user_permissions(session: Session, user_id: str) -> UserPermissions | None:
    """Explicit overrides for a user (first permissions row), or None when there is none."""
    row = _get_row(session, user_id)
    if not row.permissions:
        return None
    return map_permissions(_permissions_to_record(row.permissions[0]))


def _apply_permissions(row: SystemUserRow, patch: UserPermissionsPatch) -> None:
    values = permissions_to_row(patch)
    if row.permissions:
        # Same row map_user_with_permissions reads.
        target = row.permissions[0]
        for name, value in values.items():
            setattr(target, name, value)
    else:
        row.permissions.append(SystemUserPermissions(**values))


def update_user_permissions(
    session: Session,
    user_id: str,
    patch: UserPermissionsPatch,
) -> UserPermissions | None:
    """Write back only the flags set on patch; others keep their current override."""
    row = _get_row(session, user_id)
    _apply_permissions(row, patch)
    session.commit()
    session.refresh(row)
    logger.info(
        "User permissions updated",
        extra={"user_id": user_id, "fields": sorted(permissions_to_row(patch))},
    )
    return get_user_permissions(session, user_id)


def switch_unit(
    session: Session,
    current_user: SystemUser,
    unit_id: str,
    password: str | None = None,
) -> SystemUser:
    """
    Move current_user to another unit.

    Allowed for admins, and for users with a can_switch_units override who confirm their password.
    """
    if not can_switch_units(current_user):
        raise PermissionDeniedError("You are not allowed to switch units.")
    row = _get_row(session, current_user.id)
    if not current_user.is_admin and (
        not password or not verify_password(password, row.password_hash)
    ):
        raise AuthenticationError("Password confirmation is required to switch units.")
    _ensure_unit_exists(session, unit_id)
    row.unit_id = unit_id
    session.commit()
    session.refresh(row)
    logger.info("User switched unit", extra={"user_id": row.id, "unit_id": unit_id})
    return _to_user(row)
