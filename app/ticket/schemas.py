# app/ticket/schemas.py
import enum

from pydantic import BaseModel, Field, computed_field

from app.core.timeutils import UtcDatetime
from app.ticket.models import TicketCategory, TicketPriority, TicketStatus
from app.views.projections import suggest_priority, time_ago


class TicketFilter(str, enum.Enum):
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"
    OPEN = "open"
    ESCALATED = "escalated"
    ALL = "all"


class TicketBase(BaseModel):
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class TicketCreate(TicketBase):
    category: TicketCategory = TicketCategory.GENERAL
    priority: TicketPriority = TicketPriority.NORMAL
    ride_id: str | None = None
    driver_phone_ref: str | None = None


class TicketAssign(BaseModel):
    # Defaults to the acting agent
    agent_id: str | None = None


class TicketRespond(BaseModel):
    message: str = Field(..., min_length=1)
    internal: bool = False


class TicketResolve(BaseModel):
    resolution_notes: str | None = None


class TicketOut(TicketBase):
    id: str
    category: TicketCategory | None
    priority: TicketPriority
    status: TicketStatus
    assigned_agent_id: str | None = None
    escalation_id: str | None = None
    escalated_to: str | None = None
    ride_id: str | None = None
    driver_phone_ref: str | None = None
    resolution_notes: str | None = None
    first_response_at: UtcDatetime | None = None
    resolved_at: UtcDatetime | None = None
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def time_ago(self) -> str:
        return time_ago(self.created_at)

    @computed_field
    @property
    def last_update(self) -> str:
        return time_ago(self.updated_at)

    @computed_field
    @property
    def suggested_priority(self) -> str:
        return suggest_priority(self.subject, self.message)


class TicketResponseOut(BaseModel):
    id: str
    ticket_id: str
    sender_type: str | None
    sender_id: str | None
    message: str
    is_internal: bool
    created_at: UtcDatetime | None = None

    model_config = {"from_attributes": True}


class BackfillResult(BaseModel):
    updated: int
