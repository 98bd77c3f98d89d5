"""Permission resolution: explicit per-user overrides first, then the admin role, then fixed policy.

Final capabilities are always computed here; route guards only read the resolved set.
"""

from yardtrack.schemas.users import EffectivePermissions, SystemUser, UserPermissions

# Fixed policy: every authenticated user may register movements.
CAN_CREATE_MOVEMENTS_POLICY = True
# Fixed policy: movements are visible to every authenticated user; a False override is ignored.
CAN_VIEW_MOVEMENTS_POLICY = True

# Capabilities resolved as override -> role. Movement view/create are fixed above.
RESOLVED_CAPABILITIES: tuple[str, ...] = (
    "can_view_vehicles",
    "can_edit_vehicles",
    "can_edit_movements",
    "can_view_users",
    "can_edit_users",
    "can_view_units",
    "can_edit_units",
)


def resolve_capability(
    override: UserPermissions | None,
    capability: str,
    is_admin: bool,
) -> bool:
    """An explicit override (True or False) wins; without one, grant iff the user is admin."""
    value = getattr(override, capability, None) if override is not None else None
    if value is not None:
        return bool(value)
    return is_admin


def resolve_permissions(user: SystemUser | None) -> EffectivePermissions | None:
    """
    Compute the effective capability set for a user.

    Returns None for no user (unauthenticated context has no permission set at all).
    """
    if user is None:
        return None
    resolved = {
        capability: resolve_capability(user.permissions, capability, user.is_admin)
        for capability in RESOLVED_CAPABILITIES
    }
    return EffectivePermissions(
        **resolved,
        can_view_movements=CAN_VIEW_MOVEMENTS_POLICY,
        can_create_movements=CAN_CREATE_MOVEMENTS_POLICY,
    )


def can_switch_units(user: SystemUser | None) -> bool:
    """Admins may always switch units; others need an explicit can_switch_units override."""
    if user is None:
        return False
    return resolve_capability(user.permissions, "can_switch_units", user.is_admin)


def has_permission(permissions: EffectivePermissions | None, capability: str) -> bool:
    """True if the resolved set grants capability. Unknown capability names raise AttributeError."""
    if permissions is None:
        return False
    if capability not in EffectivePermissions.model_fields:
        raise AttributeError(f"Unknown capability: {capability}")
    return bool(getattr(permissions, capability))
