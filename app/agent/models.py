# app/agent/models.py
from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, ForeignKey, String

from app.access.roles import CallCenterRole
from app.core.database import Base, enum_values, new_id
from app.core.timeutils import utcnow


class Agent(Base):
    __tablename__ = "call_center_users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    role = Column(
        Enum(CallCenterRole, name="call_center_role", values_callable=enum_values),
        default=CallCenterRole.AGENT,
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(String(36), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class ActivityLog(Base):
    """Audit trail. Rows are inserted once and never updated or deleted."""

    __tablename__ = "agent_activity_logs"

    id = Column(String(36), primary_key=True, default=new_id)
    agent_id = Column(String(36), ForeignKey("call_center_users.id"), index=True)
    activity_type = Column(String, index=True)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
