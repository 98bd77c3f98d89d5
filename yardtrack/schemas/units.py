"""Pydantic schemas for units (yards/branches)."""

from pydantic import Field

from yardtrack.schemas.base import CamelModel


class Unit(CamelModel):
    """Unit as returned to clients, with optional assignment counts."""

    id: str
    name: str
    code: str
    address: str | None = None
    vehicle_count: int | None = Field(default=None, ge=0)
    users_count: int | None = Field(default=None, ge=0)


class UnitCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=32)
    address: str | None = Field(default=None, max_length=1024)


class UnitUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    code: str | None = Field(default=None, min_length=1, max_length=32)
    address: str | None = Field(default=None, max_length=1024)


class UnitDeleteCheck(CamelModel):
    """Whether a unit can be deleted, and what still references it."""

    can_delete: bool
    vehicle_count: int = Field(..., ge=0)
    users_count: int = Field(..., ge=0)


class UnitsListResponse(CamelModel):
    units: list[Unit]
