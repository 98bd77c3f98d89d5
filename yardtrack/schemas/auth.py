"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field

from yardtrack.schemas.base import CamelModel
from yardtrack.schemas.users import EffectivePermissions, SystemUser


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class CurrentUserResponse(CamelModel):
    """The authenticated user and the capabilities resolved for them."""

    user: SystemUser
    permissions: EffectivePermissions


class SwitchUnitRequest(CamelModel):
    """Move the current user to another unit. Non-admins must confirm with their password."""

    unit_id: str = Field(..., min_length=1)
    password: str | None = Field(default=None, max_length=128)
