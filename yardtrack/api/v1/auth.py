"""JWT login and auth dependencies (get_current_user, get_current_permissions, require_permission)."""

import logging
from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from yardtrack.api.v1.errors import to_http_exception
from yardtrack.core.config import get_settings
from yardtrack.core.database import get_db
from yardtrack.core.security import create_access_token, token_subject
from yardtrack.models import SystemUser as SystemUserRow
from yardtrack.schemas.auth import (
    CurrentUserResponse,
    LoginRequest,
    SwitchUnitRequest,
    TokenResponse,
)
from yardtrack.schemas.users import EffectivePermissions, SystemUser, UserRole, UserStatus
from yardtrack.services import users as user_service
from yardtrack.services.errors import ServiceError
from yardtrack.services.permissions import has_permission, resolve_permissions

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    try:
        user = user_service.authenticate(db, body.username, body.password)
    except ServiceError as e:
        raise to_http_exception(e) from e
    token = create_access_token(sub=user.id, role=user.role or "", unit_id=user.unit_id)
    logger.info("User logged in", extra={"user_id": user.id})
    return TokenResponse(access_token=token, token_type="bearer")


def _dev_user(db: Session) -> SystemUser:
    """First active admin; used only when AUTH_ENABLED is False."""
    row = (
        db.query(SystemUserRow)
        .filter(
            SystemUserRow.role == UserRole.ADMIN.value,
            SystemUserRow.status == UserStatus.ACTIVE.value,
        )
        .order_by(SystemUserRow.created_at)
        .first()
    )
    if row is None:
        raise _unauthorized("Authentication disabled but no active admin exists")
    return user_service.get_user(db, row.id)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> SystemUser:
    """Dependency: require valid Bearer JWT and return a fresh snapshot of the current user. Raises 401 if missing or invalid."""
    if not get_settings().AUTH_ENABLED:
        return _dev_user(db)
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        sub = token_subject(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    user = user_service.get_user(db, sub)
    if user is None:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise _unauthorized("User is inactive")
    return user


def get_current_permissions(
    current_user: Annotated[SystemUser, Depends(get_current_user)],
) -> EffectivePermissions:
    """Dependency: effective capabilities of the current user."""
    return resolve_permissions(current_user)


def require_permission(capability: str) -> Callable[..., SystemUser]:
    """Build a dependency that returns the current user, or raises 403 if capability is not granted."""

    def dependency(
        current_user: Annotated[SystemUser, Depends(get_current_user)],
        permissions: Annotated[EffectivePermissions, Depends(get_current_permissions)],
    ) -> SystemUser:
        if not has_permission(permissions, capability):
            logger.info(
                "Permission denied",
                extra={"user_id": current_user.id, "capability": capability},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission for this action.",
            )
        return current_user

    return dependency


@router.get("/me", response_model=CurrentUserResponse)
def me(
    current_user: Annotated[SystemUser, Depends(get_current_user)],
    permissions: Annotated[EffectivePermissions, Depends(get_current_permissions)],
) -> CurrentUserResponse:
    """Current user and the capabilities resolved for them (drives UI gating)."""
    return CurrentUserResponse(user=current_user, permissions=permissions)


@router.post("/switch-unit", response_model=CurrentUserResponse)
def switch_unit(
    body: SwitchUnitRequest,
    current_user: Annotated[SystemUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUserResponse:
    """Move the current user to another unit (admins, or users allowed to switch units)."""
    try:
        user = user_service.switch_unit(db, current_user, body.unit_id, body.password)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return CurrentUserResponse(user=user, permissions=resolve_permissions(user))
