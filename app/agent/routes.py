# app/agent/routes.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.access import policy
from app.agent import services as agent_service
from app.agent.schemas import ActivityLogOut, AgentCreate, AgentOut, AgentRoleUpdate, AgentStatusUpdate
from app.core.database import get_db
from app.core.errors import Forbidden
from app.core.session import Actor, get_call_center_actor

router = APIRouter(prefix="/agents", tags=["Agents"])


@router.get("/me", response_model=AgentOut)
def me(actor: Actor = Depends(get_call_center_actor), db: Session = Depends(get_db)):
    return agent_service.get_agent_or_404(db, actor.id)


@router.get("/", response_model=list[AgentOut])
def list_all(actor: Actor = Depends(get_call_center_actor), db: Session = Depends(get_db)):
    return agent_service.get_all_agents(db)


@router.post("/", response_model=AgentOut, status_code=201)
def create(
    payload: AgentCreate,
    actor: Actor = Depends(get_call_center_actor),
    db: Session = Depends(get_db),
):
    return agent_service.create_agent(db, actor, payload)


@router.put("/{agent_id}/status", response_model=AgentOut)
def update_status(
    agent_id: str,
    payload: AgentStatusUpdate,
    actor: Actor = Depends(get_call_center_actor),
    db: Session = Depends(get_db),
):
    return agent_service.set_agent_active(db, actor, agent_id, payload.is_active)


@router.put("/{agent_id}/role", response_model=AgentOut)
def update_role(
    agent_id: str,
    payload: AgentRoleUpdate,
    actor: Actor = Depends(get_call_center_actor),
    db: Session = Depends(get_db),
):
    return agent_service.set_agent_role(db, actor, agent_id, payload.role)


@router.get("/activity", response_model=list[ActivityLogOut])
def activity(
    limit: int = Query(default=50, ge=1, le=500),
    agent_id: str | None = Query(default=None, description="Only entries written by this agent"),
    actor: Actor = Depends(get_call_center_actor),
    db: Session = Depends(get_db),
):
    # Agents only see their own trail
    if not policy.is_supervisor_or_above(actor):
        if agent_id and agent_id != actor.id:
            raise Forbidden("Agents may only view their own activity")
        agent_id = actor.id
    return agent_service.get_activity(db, limit=limit, agent_id=agent_id)
