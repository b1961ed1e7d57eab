# app/ticket/services.py
"""
Ticket state machine.

    open -> in_progress -> resolved | closed

``resolved`` and ``closed`` are terminal. Every transition is written as a
conditional UPDATE whose WHERE clause restates its precondition, so a caller
that lost a race gets a precondition error instead of overwriting the winner.
"""
from datetime import datetime

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from app.access import policy
from app.agent import services as agent_service
from app.core.database import commit
from app.core.errors import AlreadyAssigned, Forbidden, NotFound, TicketClosed, ValidationError
from app.core.logger import get_logger
from app.core.session import Actor
from app.core.timeutils import as_utc, utcnow
from app.ticket.categorize import infer_category
from app.ticket.models import TERMINAL_STATUSES, Ticket, TicketResponse, TicketStatus
from app.ticket.schemas import TicketCreate, TicketFilter

logger = get_logger(__name__)


def conditional_update(db: Session, ticket_id: str, values: dict, *conditions) -> bool:
    result = db.execute(
        update(Ticket)
        .where(Ticket.id == ticket_id, *conditions)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def ensure_open(ticket: Ticket) -> None:
    if ticket.status in TERMINAL_STATUSES:
        raise TicketClosed(f"Ticket {ticket.id} is {ticket.status.value}")


def get_ticket(db: Session, ticket_id: str) -> Ticket | None:
    return db.query(Ticket).filter(Ticket.id == ticket_id).first()


def get_ticket_or_404(db: Session, ticket_id: str) -> Ticket:
    ticket = get_ticket(db, ticket_id)
    if ticket is None:
        raise NotFound(f"Ticket '{ticket_id}' not found")
    return ticket


def get_visible_ticket(db: Session, actor: Actor, ticket_id: str) -> Ticket:
    ticket = get_ticket_or_404(db, ticket_id)
    if not policy.is_supervisor_or_above(actor) and ticket.assigned_agent_id not in (None, actor.id):
        raise Forbidden("This ticket is assigned to another agent")
    return ticket


def create_ticket(db: Session, actor: Actor, payload: TicketCreate) -> Ticket:
    now = utcnow()
    ticket = Ticket(**payload.model_dump(), status=TicketStatus.OPEN, created_at=now, updated_at=now)
    db.add(ticket)
    commit(db)
    db.refresh(ticket)
    logger.info("Ticket %s opened by %s (%s)", ticket.id, actor.id, ticket.priority.value)
    return ticket


def list_tickets(
    db: Session,
    actor: Actor,
    ticket_filter: TicketFilter = TicketFilter.ALL,
    status: TicketStatus | None = None,
    priority=None,
    search: str | None = None,
    updated_since: datetime | None = None,
    limit: int = 100,
) -> list[Ticket]:
    query = db.query(Ticket)

    # Agents only ever see their own queue
    if not policy.is_supervisor_or_above(actor):
        query = query.filter(Ticket.assigned_agent_id == actor.id)
    elif ticket_filter == TicketFilter.ASSIGNED:
        query = query.filter(Ticket.assigned_agent_id.is_not(None))
    elif ticket_filter == TicketFilter.UNASSIGNED:
        query = query.filter(Ticket.assigned_agent_id.is_(None))
    elif ticket_filter == TicketFilter.ESCALATED:
        query = query.filter(Ticket.escalation_id.is_not(None))

    if ticket_filter == TicketFilter.OPEN:
        query = query.filter(Ticket.status.in_([TicketStatus.OPEN, TicketStatus.IN_PROGRESS]))
    if status:
        query = query.filter(Ticket.status == status)
    if priority:
        query = query.filter(Ticket.priority == priority)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Ticket.subject.ilike(pattern), Ticket.driver_phone_ref.ilike(pattern)))
    if updated_since:
        query = query.filter(Ticket.updated_at >= as_utc(updated_since))

    return query.order_by(Ticket.created_at.desc()).limit(limit).all()


def get_responses(db: Session, actor: Actor, ticket_id: str) -> list[TicketResponse]:
    get_visible_ticket(db, actor, ticket_id)
    query = db.query(TicketResponse).filter(TicketResponse.ticket_id == ticket_id)
    return query.order_by(TicketResponse.created_at.asc()).all()


def assign_ticket(db: Session, actor: Actor, ticket_id: str, agent_id: str | None = None) -> Ticket:
    target_id = agent_id or actor.id
    policy.require_assignment_rights(actor, target_id)

    ticket = get_ticket_or_404(db, ticket_id)
    ensure_open(ticket)
    if ticket.assigned_agent_id is not None:
        raise AlreadyAssigned(f"Ticket {ticket.id} is already assigned")

    target = agent_service.get_agent(db, target_id)
    if target is None or not target.is_active:
        raise ValidationError(f"Agent '{target_id}' cannot take tickets")

    now = utcnow()
    won = conditional_update(
        db,
        ticket_id,
        {
            "assigned_agent_id": target_id,
            "status": TicketStatus.IN_PROGRESS,
            "first_response_at": ticket.first_response_at or now,
            "updated_at": now,
        },
        Ticket.assigned_agent_id.is_(None),
        Ticket.status.not_in(TERMINAL_STATUSES),
    )
    if not won:
        db.rollback()
        db.refresh(ticket)
        ensure_open(ticket)
        raise AlreadyAssigned(f"Ticket {ticket.id} was assigned to someone else")

    commit(db)
    db.refresh(ticket)
    logger.info("Ticket %s assigned to %s by %s", ticket.id, target_id, actor.id)

    agent_service.log_activity(db, actor.id, "ticket_assigned", {"ticket_id": ticket.id, "agent_id": target_id})
    return ticket


def respond(db: Session, actor: Actor, ticket_id: str, message: str, internal: bool = False) -> TicketResponse:
    ticket = get_ticket_or_404(db, ticket_id)
    ensure_open(ticket)
    policy.require_ticket_handler(actor, ticket.assigned_agent_id, "respond to")
    if not message.strip():
        raise ValidationError("Response message is required")

    now = utcnow()
    response = TicketResponse(
        ticket_id=ticket.id,
        sender_type="agent",
        sender_id=actor.id,
        message=message,
        is_internal=internal,
        created_at=now,
    )
    db.add(response)
    db.flush()

    values = {"updated_at": now}
    if not internal:
        # open and in_progress both land in in_progress; terminal rows are excluded below
        values["status"] = TicketStatus.IN_PROGRESS
        values["first_response_at"] = ticket.first_response_at or now

    if not conditional_update(db, ticket_id, values, Ticket.status.not_in(TERMINAL_STATUSES)):
        db.rollback()
        raise TicketClosed(f"Ticket {ticket_id} was closed")

    commit(db)
    db.refresh(response)
    logger.info("Ticket %s %s by %s", ticket_id, "noted" if internal else "answered", actor.id)
    return response


def _finish(db: Session, actor: Actor, ticket_id: str, final: TicketStatus, notes: str | None) -> Ticket:
    ticket = get_ticket_or_404(db, ticket_id)
    ensure_open(ticket)
    verb = "resolve" if final == TicketStatus.RESOLVED else "close"
    policy.require_ticket_handler(actor, ticket.assigned_agent_id, verb)

    now = utcnow()
    values = {"status": final, "resolved_at": now, "updated_at": now}
    if notes:
        values["resolution_notes"] = notes
    if not conditional_update(db, ticket_id, values, Ticket.status.not_in(TERMINAL_STATUSES)):
        db.rollback()
        raise TicketClosed(f"Ticket {ticket_id} was already finished")

    commit(db)
    db.refresh(ticket)
    logger.info("Ticket %s %s by %s", ticket.id, final.value, actor.id)

    agent_service.log_activity(db, actor.id, f"ticket_{final.value}", {"ticket_id": ticket.id})
    return ticket


def resolve_ticket(db: Session, actor: Actor, ticket_id: str, notes: str | None = None) -> Ticket:
    return _finish(db, actor, ticket_id, TicketStatus.RESOLVED, notes)


def close_ticket(db: Session, actor: Actor, ticket_id: str, notes: str | None = None) -> Ticket:
    return _finish(db, actor, ticket_id, TicketStatus.CLOSED, notes)


def backfill_categories(db: Session, actor: Actor) -> int:
    """Fill missing categories from the subject line. Returns rows touched."""
    if not policy.is_supervisor_or_above(actor):
        raise Forbidden("Only supervisors and admins may backfill categories")

    tickets = db.query(Ticket).filter(Ticket.category.is_(None)).all()
    for ticket in tickets:
        ticket.category = infer_category(ticket.subject)
    commit(db)
    logger.info("Backfilled category on %d tickets", len(tickets))
    return len(tickets)
