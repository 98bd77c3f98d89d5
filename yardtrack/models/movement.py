"""ORM model for vehicle movements (exits from and entries into a unit's yard)."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Time, func
from sqlalchemy.orm import relationship

from yardtrack.models.base import Base, new_id


class Movement(Base):
    """
    One vehicle trip: created at departure, finalized on arrival.

    status mirrors the vehicle location while the movement is open ('out') and
    becomes 'yard' once finalized. duration is stored as 'HH:MM'.
    """

    __tablename__ = "movements"

    id = Column(String(36), primary_key=True, default=new_id)
    vehicle_id = Column(String(36), ForeignKey("vehicles.id"), nullable=False, index=True)
    driver = Column(String(255), nullable=False)
    destination = Column(String(512), nullable=True)
    initial_mileage = Column(Integer, nullable=False)
    final_mileage = Column(Integer, nullable=True)
    mileage_run = Column(Integer, nullable=True)
    departure_unit_id = Column(String(36), ForeignKey("units.id"), nullable=False)
    departure_date = Column(Date, nullable=False)
    departure_time = Column(Time, nullable=False)
    arrival_unit_id = Column(String(36), ForeignKey("units.id"), nullable=True)
    arrival_date = Column(Date, nullable=True)
    arrival_time = Column(Time, nullable=True)
    duration = Column(String(16), nullable=True)
    status = Column(String(8), nullable=False, index=True)
    type = Column(String(16), nullable=False)
    created_by = Column(String(36), ForeignKey("system_users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    vehicle = relationship("Vehicle", lazy="joined")
    departure_unit = relationship("Unit", foreign_keys=[departure_unit_id], lazy="joined")
    arrival_unit = relationship("Unit", foreign_keys=[arrival_unit_id], lazy="joined")
