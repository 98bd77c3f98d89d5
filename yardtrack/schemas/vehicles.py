"""Pydantic schemas for fleet vehicles."""

from enum import Enum

from pydantic import Field

from yardtrack.schemas.base import CamelModel

MIN_VEHICLE_YEAR = 1900
MAX_VEHICLE_YEAR = 2100


class VehicleLocation(str, Enum):
    """Where a vehicle currently is: parked in its unit's yard or out on a movement."""

    YARD = "yard"
    OUT = "out"


class Vehicle(CamelModel):
    id: str
    plate: str
    make: str
    model: str
    color: str
    year: int
    mileage: int
    mileage_label: str | None = Field(default=None, description="Display form, e.g. \"12.345 km\"")
    photo_url: str | None = None
    location: VehicleLocation
    unit_id: str
    unit_name: str | None = None


class VehicleCreate(CamelModel):
    plate: str = Field(..., min_length=1, max_length=16)
    make: str = Field(..., min_length=1, max_length=128)
    model: str = Field(..., min_length=1, max_length=128)
    color: str = Field(default="", max_length=64)
    year: int = Field(..., ge=MIN_VEHICLE_YEAR, le=MAX_VEHICLE_YEAR)
    mileage: int = Field(default=0, ge=0)
    photo_url: str | None = Field(default=None, max_length=2048)
    unit_id: str = Field(..., min_length=1)


class VehicleUpdate(CamelModel):
    plate: str | None = Field(default=None, min_length=1, max_length=16)
    make: str | None = Field(default=None, min_length=1, max_length=128)
    model: str | None = Field(default=None, min_length=1, max_length=128)
    color: str | None = Field(default=None, max_length=64)
    year: int | None = Field(default=None, ge=MIN_VEHICLE_YEAR, le=MAX_VEHICLE_YEAR)
    mileage: int | None = Field(default=None, ge=0)
    photo_url: str | None = Field(default=None, max_length=2048)
    unit_id: str | None = Field(default=None, min_length=1)


class VehiclesListResponse(CamelModel):
    vehicles: list[Vehicle]
