# app/core/session.py
"""
Explicit acting-user context.

The console used to keep the logged-in user in page storage; here each request
resolves its actor from a header and hands the ``Actor`` to every service call.
"""
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.access.roles import AdminRole, CallCenterRole
from app.admin.models import AdminProfile
from app.agent.models import Agent
from app.core.database import get_db
from app.core.errors import Unauthenticated


@dataclass(frozen=True)
class Actor:
    id: str
    name: str
    email: str
    role: CallCenterRole | AdminRole


def _load_actor(db: Session, model, actor_id: str | None) -> Actor:
    if not actor_id:
        raise Unauthenticated("Missing acting user header")
    row = db.get(model, actor_id)
    if row is None:
        raise Unauthenticated(f"Unknown account '{actor_id}'")
    if not row.is_active:
        raise Unauthenticated("Account is deactivated")
    return Actor(id=row.id, name=row.name, email=row.email, role=row.role)


def get_call_center_actor(
    x_agent_id: Annotated[str | None, Header(alias="X-Agent-Id")] = None,
    db: Session = Depends(get_db),
) -> Actor:
    return _load_actor(db, Agent, x_agent_id)


def get_admin_actor(
    x_admin_id: Annotated[str | None, Header(alias="X-Admin-Id")] = None,
    db: Session = Depends(get_db),
) -> Actor:
    return _load_actor(db, AdminProfile, x_admin_id)


__all__ = ["Actor", "get_call_center_actor", "get_admin_actor"]
