# app/ticket/models.py
import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, String, Text

from app.core.database import Base, enum_values, new_id
from app.core.timeutils import utcnow


class TicketStatus(enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


TERMINAL_STATUSES = (TicketStatus.RESOLVED, TicketStatus.CLOSED)


class TicketPriority(enum.Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class TicketCategory(enum.Enum):
    COMPLAINT = "complaint"
    TECHNICAL = "technical"
    BILLING = "billing"
    GENERAL = "general"


class Ticket(Base):
    __tablename__ = "support_tickets"

    id = Column(String(36), primary_key=True, default=new_id)
    subject = Column(String, index=True, nullable=False)
    message = Column(Text, nullable=False)
    # Null only on rows created before categories were chosen explicitly
    category = Column(Enum(TicketCategory, name="ticket_category", values_callable=enum_values), nullable=True)
    priority = Column(
        Enum(TicketPriority, name="ticket_priority", values_callable=enum_values),
        default=TicketPriority.NORMAL,
        nullable=False,
        index=True,
    )
    status = Column(
        Enum(TicketStatus, name="ticket_status", values_callable=enum_values),
        default=TicketStatus.OPEN,
        nullable=False,
        index=True,
    )

    assigned_agent_id = Column(String(36), ForeignKey("call_center_users.id"), nullable=True, index=True)
    escalation_id = Column(String(36), nullable=True)
    escalated_to = Column(String(36), ForeignKey("call_center_users.id"), nullable=True)

    ride_id = Column(String(36), nullable=True)
    driver_phone_ref = Column(String, nullable=True)
    communication_channel_id = Column(String(36), nullable=True)

    resolution_notes = Column(Text, nullable=True)
    first_response_at = Column(DateTime(timezone=True), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, index=True)


class TicketResponse(Base):
    __tablename__ = "ticket_responses"

    id = Column(String(36), primary_key=True, default=new_id)
    ticket_id = Column(String(36), ForeignKey("support_tickets.id"), index=True)
    sender_type = Column(String, default="agent")
    sender_id = Column(String(36), nullable=True)
    message = Column(Text, nullable=False)
    is_internal = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
