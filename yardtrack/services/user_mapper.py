"""Map raw system_users records (snake_case, embedded relations) to SystemUser / UserPermissions and back."""

import warnings
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from yardtrack.schemas.users import (
    PERMISSION_FIELDS,
    RawPermissionsRecord,
    RawUserRecord,
    SystemUser,
    UserPermissions,
    UserPermissionsPatch,
)


class MalformedInputError(ValueError):
    """Raised when a raw record cannot be mapped (not a mapping, missing id, non-boolean flags)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class AmbiguousPermissionsWarning(UserWarning):
    """A user record carried more than one permissions row; only the first one is used."""


def _validate_user(raw: Any) -> RawUserRecord:
    if not isinstance(raw, Mapping):
        raise MalformedInputError(
            f"User record must be a mapping, got {type(raw).__name__}"
        )
    try:
        return RawUserRecord.model_validate(dict(raw))
    except ValidationError as e:
        raise MalformedInputError(f"Malformed user record: {e.errors()}", cause=e) from e


def _validate_permissions(raw: Any) -> RawPermissionsRecord:
    if isinstance(raw, RawPermissionsRecord):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedInputError(
            f"Permissions record must be a mapping, got {type(raw).__name__}"
        )
    try:
        return RawPermissionsRecord.model_validate(dict(raw))
    except ValidationError as e:
        raise MalformedInputError(
            f"Malformed permissions record: {e.errors()}", cause=e
        ) from e


def _to_user(record: RawUserRecord) -> SystemUser:
    return SystemUser(
        id=record.id,
        name=record.name,
        username=record.username,
        email=record.email,
        role=record.role,
        shift=record.shift,
        status=record.status,
        unit_id=record.unit_id,
        unit_name=record.units.name if record.units is not None else None,
    )


def map_user(raw: Mapping[str, Any]) -> SystemUser:
    """
    Map a raw user record to a SystemUser without permissions.

    Missing optional fields stay None; unit_name is taken from the embedded `units` relation.
    Raises MalformedInputError when the record has no id.
    """
    return _to_user(_validate_user(raw))


def map_permissions(raw: Mapping[str, Any] | RawPermissionsRecord) -> UserPermissions:
    """Rename each permission flag one-to-one. No defaulting: a missing flag is None."""
    record = _validate_permissions(raw)
    return UserPermissions(**{name: getattr(record, name) for name in PERMISSION_FIELDS})


def map_user_with_permissions(raw: Mapping[str, Any]) -> SystemUser:
    """
    Map a raw user record and attach its permission overrides.

    Only the first element of `system_user_permissions` is validated and mapped; the rest are
    ignored, even if malformed. When the collection has more than one element an
    AmbiguousPermissionsWarning is emitted; the first still wins.
    """
    record = _validate_user(raw)
    user = _to_user(record)
    rows = record.system_user_permissions or []
    if not rows:
        return user
    if len(rows) > 1:
        warnings.warn(
            f"User {record.id} has {len(rows)} permission rows; using the first",
            AmbiguousPermissionsWarning,
            stacklevel=2,
        )
    return user.model_copy(update={"permissions": map_permissions(rows[0])})


def permissions_to_row(patch: UserPermissionsPatch | UserPermissions) -> dict[str, bool]:
    """Build the column dict for a permissions write-back. Fields left as None are omitted."""
    return {
        name: value
        for name in PERMISSION_FIELDS
        if (value := getattr(patch, name)) is not None
    }
