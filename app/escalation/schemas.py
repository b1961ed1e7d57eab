# app/escalation/schemas.py
from pydantic import BaseModel, Field, computed_field

from app.core.timeutils import UtcDatetime
from app.escalation.models import EscalationStatus
from app.views.projections import time_ago


class EscalationCreate(BaseModel):
    ticket_id: str
    # Emptiness is checked by escalate()
    reason: str = ""


class EscalationAcknowledge(BaseModel):
    code: str = Field(..., min_length=1)


class EscalationOut(BaseModel):
    """Read model; never carries the code."""

    id: str
    ticket_id: str | None
    escalated_by: str | None
    escalated_to: str | None = None
    reason: str
    status: EscalationStatus
    otp_verified_at: UtcDatetime | None = None
    created_at: UtcDatetime | None = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def time_ago(self) -> str:
        return time_ago(self.created_at)


class EscalationCreated(BaseModel):
    escalation: EscalationOut
    code: str
