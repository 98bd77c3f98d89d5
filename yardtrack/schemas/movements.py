"""Pydantic schemas for vehicle movements (exits and entries)."""

from datetime import date, time
from enum import Enum

from pydantic import Field

from yardtrack.schemas.base import CamelModel
from yardtrack.schemas.vehicles import VehicleLocation


class MovementType(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"
    # First registration of a vehicle already in a yard.
    INITIAL = "initial"


class Movement(CamelModel):
    id: str
    vehicle_id: str
    vehicle_plate: str | None = None
    vehicle_name: str | None = None
    photo_url: str | None = None
    driver: str
    destination: str | None = None
    initial_mileage: int
    final_mileage: int | None = None
    mileage_run: int | None = None
    departure_unit_id: str
    departure_unit_name: str | None = None
    departure_date: date
    departure_time: time
    arrival_unit_id: str | None = None
    arrival_unit_name: str | None = None
    arrival_date: date | None = None
    arrival_time: time | None = None
    duration: str | None = None
    status: VehicleLocation
    type: MovementType
    created_by: str | None = None


class MovementCreate(CamelModel):
    vehicle_id: str = Field(..., min_length=1)
    driver: str = Field(..., min_length=1, max_length=255)
    destination: str | None = Field(default=None, max_length=512)
    initial_mileage: int = Field(..., ge=0)
    departure_unit_id: str = Field(..., min_length=1)
    departure_date: date | None = None
    departure_time: time | None = None
    type: MovementType


class MovementFinalize(CamelModel):
    """Arrival data that closes an open (out) movement."""

    final_mileage: int = Field(..., ge=0)
    arrival_date: date
    arrival_time: time
    arrival_unit_id: str = Field(..., min_length=1)


class MovementsListResponse(CamelModel):
    movements: list[Movement]
