"""ORM model for fleet vehicles."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from yardtrack.models.base import Base, new_id


class Vehicle(Base):
    """
    A fleet vehicle. location is 'yard' (parked at its unit) or 'out' (on a movement).
    """

    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=new_id)
    plate = Column(String(16), nullable=False, unique=True, index=True)
    make = Column(String(128), nullable=False)
    model = Column(String(128), nullable=False)
    color = Column(String(64), nullable=False, default="")
    year = Column(Integer, nullable=False)
    mileage = Column(Integer, nullable=False, default=0)
    photo_url = Column(String(2048), nullable=True)
    location = Column(String(8), nullable=False, default="yard", index=True)
    unit_id = Column(String(36), ForeignKey("units.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    unit = relationship("Unit", lazy="joined")
