# app/escalation/services.py
"""
Emergency escalation workflow.

    pending -> acknowledged -> resolved

A supervisor or admin escalates a ticket with a reason and receives a six
digit code. Whoever is handed the code out of band acknowledges with it;
only an exact match moves the escalation forward. There is no attempt
counter. Codes never expire unless ``ESCALATION_CODE_TTL_SECONDS`` is set.
"""
from datetime import timedelta

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.access import policy
from app.agent import services as agent_service
from app.core.config import get_settings
from app.core.database import commit
from app.core.errors import (
    AlreadyEscalated,
    CodeExpired,
    EscalationNotAcknowledged,
    EscalationNotPending,
    InvalidCode,
    NotFound,
    ValidationError,
)
from app.core.logger import get_logger
from app.core.session import Actor
from app.core.timeutils import as_utc, utcnow
from app.escalation.models import Escalation, EscalationStatus
from app.escalation.otp import codes_match, generate_code
from app.ticket import services as ticket_service
from app.ticket.models import TERMINAL_STATUSES, Ticket, TicketPriority, TicketStatus

logger = get_logger(__name__)


def _conditional_update(db: Session, escalation_id: str, values: dict, *conditions) -> bool:
    result = db.execute(
        update(Escalation)
        .where(Escalation.id == escalation_id, *conditions)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def get_escalation_or_404(db: Session, escalation_id: str) -> Escalation:
    escalation = db.query(Escalation).filter(Escalation.id == escalation_id).first()
    if escalation is None:
        raise NotFound(f"Escalation '{escalation_id}' not found")
    return escalation


def list_escalations(db: Session, status: EscalationStatus | None = None, limit: int = 100) -> list[Escalation]:
    query = db.query(Escalation)
    if status:
        query = query.filter(Escalation.status == status)
    return query.order_by(Escalation.created_at.desc()).limit(limit).all()


def urgent_tickets(db: Session, limit: int = 100) -> list[Ticket]:
    """High and urgent tickets still in play that nobody has escalated yet, oldest first."""
    return (
        db.query(Ticket)
        .filter(Ticket.priority.in_([TicketPriority.URGENT, TicketPriority.HIGH]))
        .filter(Ticket.status.in_([TicketStatus.OPEN, TicketStatus.IN_PROGRESS]))
        .filter(Ticket.escalation_id.is_(None))
        .order_by(Ticket.created_at.asc())
        .limit(limit)
        .all()
    )


def escalate(db: Session, actor: Actor, ticket_id: str, reason: str) -> tuple[Escalation, str]:
    """
    Open an escalation on a ticket and bump the ticket to urgent.

    Returns the escalation and its code. The code is not logged or exposed by
    any read model; getting it to the receiving party is the caller's job.
    """
    policy.require_escalation_rights(actor, "create")
    if not reason or not reason.strip():
        raise ValidationError("A reason is required to escalate")

    ticket = ticket_service.get_ticket_or_404(db, ticket_id)
    ticket_service.ensure_open(ticket)
    if ticket.escalation_id is not None:
        raise AlreadyEscalated(f"Ticket {ticket.id} already has an escalation")

    now = utcnow()
    code = generate_code()
    escalation = Escalation(
        ticket_id=ticket.id,
        escalated_by=actor.id,
        escalated_to=None,
        reason=reason,
        otp_code=code,
        status=EscalationStatus.PENDING,
        created_at=now,
    )
    db.add(escalation)
    db.flush()

    linked = ticket_service.conditional_update(
        db,
        ticket.id,
        {"escalation_id": escalation.id, "priority": TicketPriority.URGENT, "updated_at": now},
        Ticket.escalation_id.is_(None),
        Ticket.status.not_in(TERMINAL_STATUSES),
    )
    if not linked:
        db.rollback()
        db.refresh(ticket)
        ticket_service.ensure_open(ticket)
        raise AlreadyEscalated(f"Ticket {ticket.id} was escalated by someone else")

    commit(db)
    db.refresh(escalation)
    logger.info("Ticket %s escalated by %s as %s", ticket.id, actor.id, escalation.id)

    agent_service.log_activity(
        db, actor.id, "escalation", {"ticket_id": ticket.id, "escalation_id": escalation.id, "reason": reason}
    )
    return escalation, code


def acknowledge(db: Session, actor: Actor, escalation_id: str, code: str) -> Escalation:
    policy.require_escalation_rights(actor, "acknowledge")
    escalation = get_escalation_or_404(db, escalation_id)
    if escalation.status != EscalationStatus.PENDING:
        raise EscalationNotPending(f"Escalation {escalation.id} is {escalation.status.value}")

    ttl = get_settings().ESCALATION_CODE_TTL_SECONDS
    if ttl is not None and as_utc(escalation.created_at) + timedelta(seconds=ttl) < utcnow():
        raise CodeExpired(f"The code for escalation {escalation.id} has expired")

    if not codes_match(escalation.otp_code, code):
        logger.warning("Wrong code submitted for escalation %s by %s", escalation.id, actor.id)
        raise InvalidCode("Invalid code")

    now = utcnow()
    won = _conditional_update(
        db,
        escalation.id,
        {"status": EscalationStatus.ACKNOWLEDGED, "escalated_to": actor.id, "otp_verified_at": now},
        Escalation.status == EscalationStatus.PENDING,
        Escalation.otp_code == code,
    )
    if not won:
        db.rollback()
        raise EscalationNotPending(f"Escalation {escalation.id} was acknowledged by someone else")

    ticket_service.conditional_update(db, escalation.ticket_id, {"escalated_to": actor.id, "updated_at": now})
    commit(db)
    db.refresh(escalation)
    logger.info("Escalation %s acknowledged by %s", escalation.id, actor.id)

    agent_service.log_activity(
        db, actor.id, "escalation_acknowledged", {"escalation_id": escalation.id, "ticket_id": escalation.ticket_id}
    )
    return escalation


def resolve(db: Session, actor: Actor, escalation_id: str) -> Escalation:
    policy.require_escalation_rights(actor, "resolve")
    escalation = get_escalation_or_404(db, escalation_id)
    if escalation.status != EscalationStatus.ACKNOWLEDGED:
        raise EscalationNotAcknowledged(
            f"Escalation {escalation.id} is {escalation.status.value}, only acknowledged escalations can be resolved"
        )

    won = _conditional_update(
        db,
        escalation.id,
        {"status": EscalationStatus.RESOLVED},
        Escalation.status == EscalationStatus.ACKNOWLEDGED,
    )
    if not won:
        db.rollback()
        raise EscalationNotAcknowledged(f"Escalation {escalation.id} was already resolved")

    commit(db)
    db.refresh(escalation)
    logger.info("Escalation %s resolved by %s", escalation.id, actor.id)

    agent_service.log_activity(
        db, actor.id, "escalation_resolved", {"escalation_id": escalation.id, "ticket_id": escalation.ticket_id}
    )
    return escalation
