# app/agent/schemas.py
from typing import Any

from pydantic import BaseModel, EmailStr, Field

from app.access.roles import CallCenterRole
from app.core.timeutils import UtcDatetime


class AgentCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    role: CallCenterRole = CallCenterRole.AGENT


class AgentStatusUpdate(BaseModel):
    is_active: bool


class AgentRoleUpdate(BaseModel):
    role: CallCenterRole


class AgentOut(BaseModel):
    id: str
    email: str
    name: str
    role: CallCenterRole
    is_active: bool
    created_by: str | None = None
    created_at: UtcDatetime | None = None

    model_config = {"from_attributes": True}


class ActivityLogOut(BaseModel):
    id: str
    agent_id: str | None
    activity_type: str | None
    details: dict[str, Any] | None = None
    created_at: UtcDatetime | None = None

    model_config = {"from_attributes": True}
