"""ORM model for units (yards/branches where vehicles and users are assigned)."""

from sqlalchemy import Column, DateTime, String, func

from yardtrack.models.base import Base, new_id


class Unit(Base):
    __tablename__ = "units"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    code = Column(String(32), nullable=False, unique=True, index=True)
    address = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
