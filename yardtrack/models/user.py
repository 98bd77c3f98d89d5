"""ORM models for system users (auth) and their per-user permission overrides."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, func
from sqlalchemy.orm import relationship

from yardtrack.models.base import Base, new_id


class SystemUser(Base):
    """
    Operator account for JWT authentication and permission resolution.

    role: 'admin' or 'operator'; shift: 'day' or 'night'; status: 'active' or 'inactive'.
    unit_id is nullable: a user may not be assigned to a unit yet.
    """

    __tablename__ = "system_users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="operator")
    shift = Column(String(16), nullable=False, default="day")
    status = Column(String(16), nullable=False, default="active")
    unit_id = Column(String(36), ForeignKey("units.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    unit = relationship("Unit", lazy="joined")
    permissions = relationship(
        "SystemUserPermissions",
        back_populates="user",
        cascade="all, delete-orphan",
        # created_at never changes on update, so the first row stays first after a write-back.
        order_by=lambda: [SystemUserPermissions.created_at, SystemUserPermissions.id],
    )


class SystemUserPermissions(Base):
    """
    Explicit permission overrides for one user.

    Every flag is nullable: NULL means "no override, fall back to the role".
    """

    __tablename__ = "system_user_permissions"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(
        String(36),
        ForeignKey("system_users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    can_view_vehicles = Column(Boolean, nullable=True)
    can_edit_vehicles = Column(Boolean, nullable=True)
    can_view_units = Column(Boolean, nullable=True)
    can_edit_units = Column(Boolean, nullable=True)
    can_view_users = Column(Boolean, nullable=True)
    can_edit_users = Column(Boolean, nullable=True)
    can_view_movements = Column(Boolean, nullable=True)
    can_edit_movements = Column(Boolean, nullable=True)
    can_switch_units = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    user = relationship("SystemUser", back_populates="permissions")
