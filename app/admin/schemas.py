# app/admin/schemas.py
from pydantic import BaseModel, EmailStr, Field

from app.access.roles import AdminRole
from app.core.timeutils import UtcDatetime


class AdminCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    role: AdminRole = AdminRole.OPERATIONS_STAFF


class AdminStatusUpdate(BaseModel):
    is_active: bool


class AdminRoleUpdate(BaseModel):
    role: AdminRole


class AdminOut(BaseModel):
    id: str
    email: str
    name: str
    role: AdminRole
    is_active: bool
    created_at: UtcDatetime | None = None

    model_config = {"from_attributes": True}
