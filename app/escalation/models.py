# app/escalation/models.py
import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text

from app.core.database import Base, enum_values, new_id
from app.core.timeutils import utcnow


class EscalationStatus(enum.Enum):
    PENDING = "pending"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"


class Escalation(Base):
    __tablename__ = "emergency_escalations"

    id = Column(String(36), primary_key=True, default=new_id)
    ticket_id = Column(String(36), ForeignKey("support_tickets.id"), index=True)
    escalated_by = Column(String(36), ForeignKey("call_center_users.id"))
    escalated_to = Column(String(36), ForeignKey("call_center_users.id"), nullable=True)
    reason = Column(Text, nullable=False)
    otp_code = Column(String(6), nullable=True)
    otp_verified_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(
        Enum(EscalationStatus, name="escalation_status", values_callable=enum_values),
        default=EscalationStatus.PENDING,
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
