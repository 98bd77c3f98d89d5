"""User administration endpoints: accounts, status, passwords and permission overrides."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from yardtrack.api.v1.auth import require_permission
from yardtrack.api.v1.errors import to_http_exception
from yardtrack.core.database import get_db
from yardtrack.schemas.users import (
    PasswordChange,
    SystemUser,
    UserCreate,
    UserPermissions,
    UserPermissionsPatch,
    UsersListResponse,
    UserStatusUpdate,
    UserUpdate,
)
from yardtrack.services import users as user_service
from yardtrack.services.errors import ServiceError

router = APIRouter()

CanViewUsers = Annotated[SystemUser, Depends(require_permission("can_view_users"))]
CanEditUsers = Annotated[SystemUser, Depends(require_permission("can_edit_users"))]
Db = Annotated[Session, Depends(get_db)]


@router.get("", response_model=UsersListResponse)
def list_users(_user: CanViewUsers, db: Db, unit_id: str | None = None) -> UsersListResponse:
    """List users ordered by name, optionally only those assigned to unit_id."""
    if unit_id:
        users = user_service.list_users_by_unit(db, unit_id)
    else:
        users = user_service.list_users(db)
    return UsersListResponse(users=users)


@router.get("/{user_id}", response_model=SystemUser)
def get_user(user_id: str, _user: CanViewUsers, db: Db) -> SystemUser:
    user = user_service.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return user


@router.post("", response_model=SystemUser, status_code=status.HTTP_201_CREATED)
def create_user(body: UserCreate, _user: CanEditUsers, db: Db) -> SystemUser:
    try:
        return user_service.create_user(db, body)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.patch("/{user_id}", response_model=SystemUser)
def update_user(user_id: str, body: UserUpdate, _user: CanEditUsers, db: Db) -> SystemUser:
    try:
        return user_service.update_user(db, user_id, body)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.patch("/{user_id}/status", response_model=SystemUser)
def update_status(
    user_id: str,
    body: UserStatusUpdate,
    current_user: CanEditUsers,
    db: Db,
) -> SystemUser:
    """Activate or deactivate a user. Users cannot deactivate themselves."""
    if user_id == current_user.id and body.status.value != current_user.status:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="You cannot change your own status.",
        )
    try:
        return user_service.set_status(db, user_id, body.status)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.put("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(user_id: str, body: PasswordChange, _user: CanEditUsers, db: Db) -> Response:
    try:
        user_service.change_password(db, user_id, body.new_password)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, current_user: CanEditUsers, db: Db) -> Response:
    if user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="You cannot delete your own account.",
        )
    try:
        user_service.delete_user(db, user_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/permissions", response_model=UserPermissions | None)
def get_permissions(user_id: str, _user: CanViewUsers, db: Db) -> UserPermissions | None:
    """Explicit overrides stored for a user; null when the user has none."""
    try:
        return user_service.get_user_permissions(db, user_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.patch("/{user_id}/permissions", response_model=UserPermissions | None)
def update_permissions(
    user_id: str,
    body: UserPermissionsPatch,
    _user: CanEditUsers,
    db: Db,
) -> UserPermissions | None:
    """Set the given overrides; omitted flags keep their current value."""
    try:
        return user_service.update_user_permissions(db, user_id, body)
    except ServiceError as e:
        raise to_http_exception(e) from e
