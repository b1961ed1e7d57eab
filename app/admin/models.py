# app/admin/models.py
from sqlalchemy import Boolean, Column, DateTime, Enum, String

from app.access.roles import AdminRole
from app.core.database import Base, enum_values, new_id
from app.core.timeutils import utcnow


class AdminProfile(Base):
    __tablename__ = "admin_profiles"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    role = Column(
        Enum(AdminRole, name="admin_role", values_callable=enum_values),
        default=AdminRole.OPERATIONS_STAFF,
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
