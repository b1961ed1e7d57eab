# app/agent/services.py
from typing import Any

from sqlalchemy.orm import Session

from app.access import policy
from app.access.roles import CallCenterRole
from app.agent.models import ActivityLog, Agent
from app.agent.schemas import AgentCreate
from app.core.database import commit
from app.core.errors import NotFound, ValidationError
from app.core.logger import get_logger
from app.core.session import Actor
from app.core.timeutils import utcnow

logger = get_logger(__name__)


def get_all_agents(db: Session) -> list[Agent]:
    return db.query(Agent).order_by(Agent.created_at.desc()).all()


def get_agent(db: Session, agent_id: str) -> Agent | None:
    return db.query(Agent).filter(Agent.id == agent_id).first()


def get_agent_or_404(db: Session, agent_id: str) -> Agent:
    agent = get_agent(db, agent_id)
    if agent is None:
        raise NotFound(f"Agent '{agent_id}' not found")
    return agent


def log_activity(db: Session, agent_id: str, activity_type: str, details: dict[str, Any] | None = None) -> ActivityLog:
    """
    Append an audit entry.

    Called after the state change it describes has been committed; a failure
    here surfaces to the caller but does not undo that change.
    """
    entry = ActivityLog(
        agent_id=agent_id,
        activity_type=activity_type,
        details={**(details or {}), "timestamp": utcnow().isoformat()},
    )
    db.add(entry)
    commit(db)
    return entry


def get_activity(db: Session, limit: int = 50, agent_id: str | None = None) -> list[ActivityLog]:
    query = db.query(ActivityLog)
    if agent_id:
        query = query.filter(ActivityLog.agent_id == agent_id)
    return query.order_by(ActivityLog.created_at.desc()).limit(limit).all()


def create_agent(db: Session, actor: Actor, payload: AgentCreate) -> Agent:
    policy.require_account_management(actor, payload.role, "create")
    if db.query(Agent).filter(Agent.email == payload.email).first():
        raise ValidationError(f"An account for {payload.email} already exists")

    agent = Agent(**payload.model_dump(), created_by=actor.id)
    db.add(agent)
    commit(db)
    db.refresh(agent)
    logger.info("Agent %s (%s) created by %s", agent.id, agent.role.value, actor.id)

    log_activity(db, actor.id, "account_created", {"account_id": agent.id, "role": agent.role.value})
    return agent


def set_agent_active(db: Session, actor: Actor, agent_id: str, is_active: bool) -> Agent:
    agent = get_agent_or_404(db, agent_id)
    policy.require_account_management(actor, agent.role, "activate" if is_active else "deactivate")
    policy.require_not_self_lockout(actor, agent.id, deactivating=not is_active)

    agent.is_active = is_active
    commit(db)
    db.refresh(agent)
    logger.info("Agent %s %s by %s", agent.id, "activated" if is_active else "deactivated", actor.id)

    log_activity(
        db, actor.id, "account_activated" if is_active else "account_deactivated", {"account_id": agent.id}
    )
    return agent


def set_agent_role(db: Session, actor: Actor, agent_id: str, role: CallCenterRole) -> Agent:
    agent = get_agent_or_404(db, agent_id)
    policy.require_account_management(actor, agent.role, "change the role of")
    policy.require_account_management(actor, role, "grant")
    policy.require_not_self_lockout(actor, agent.id, deactivating=False, new_role=role)

    previous = agent.role
    agent.role = role
    commit(db)
    db.refresh(agent)
    logger.info("Agent %s role %s -> %s by %s", agent.id, previous.value, role.value, actor.id)

    log_activity(
        db, actor.id, "role_changed", {"account_id": agent.id, "from": previous.value, "to": role.value}
    )
    return agent


def ensure_bootstrap_admin(db: Session, email: str, name: str) -> Agent:
    """Seed the first call-center admin so the console can be reached at all."""
    agent = db.query(Agent).filter(Agent.email == email).first()
    if agent is None:
        agent = Agent(email=email, name=name, role=CallCenterRole.ADMIN)
        db.add(agent)
        commit(db)
        db.refresh(agent)
        logger.info("Bootstrap call-center admin %s created", email)
    return agent
