"""SQLAlchemy ORM models."""

from yardtrack.models.base import Base
from yardtrack.models.movement import Movement
from yardtrack.models.unit import Unit
from yardtrack.models.user import SystemUser, SystemUserPermissions
from yardtrack.models.vehicle import Vehicle

__all__ = ["Base", "Movement", "SystemUser", "SystemUserPermissions", "Unit", "Vehicle"]
