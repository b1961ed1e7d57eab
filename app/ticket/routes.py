# app/ticket/routes.py
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.session import Actor, get_call_center_actor
from app.ticket import services as ticket_service
from app.ticket.models import TicketPriority, TicketStatus
from app.ticket.schemas import (
    BackfillResult,
    TicketAssign,
    TicketCreate,
    TicketFilter,
    TicketOut,
    TicketResolve,
    TicketRespond,
    TicketResponseOut,
)
from app.views.intervals import View, poll_hint

router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.post("/", response_model=TicketOut, status_code=201)
def create(ticket: TicketCreate, actor: Actor = Depends(get_call_center_actor), db: Session = Depends(get_db)):
    return ticket_service.create_ticket(db, actor, ticket)


@router.get("/", response_model=list[TicketOut], dependencies=[Depends(poll_hint(View.TICKETS))])
def list_all(
    filter: TicketFilter = Query(default=TicketFilter.ALL, description="assigned, unassigned, open, escalated or all"),
    status: TicketStatus | None = Query(default=None),
    priority: TicketPriority | None = Query(default=None),
    search: str | None = Query(default=None, description="Matches subject or driver phone"),
    updated_since: datetime | None = Query(default=None, description="Only tickets changed since this instant"),
    limit: int = Query(default=100, ge=1, le=500),
    actor: Actor = Depends(get_call_center_actor),
    db: Session = Depends(get_db),
):
    return ticket_service.list_tickets(
        db,
        actor,
        ticket_filter=filter,
        status=status,
        priority=priority,
        search=search,
        updated_since=updated_since,
        limit=limit,
    )


@router.post("/backfill-categories", response_model=BackfillResult)
def backfill_categories(actor: Actor = Depends(get_call_center_actor), db: Session = Depends(get_db)):
    return {"updated": ticket_service.backfill_categories(db, actor)}


@router.get("/{ticket_id}", response_model=TicketOut)
def get(ticket_id: str, actor: Actor = Depends(get_call_center_actor), db: Session = Depends(get_db)):
    return ticket_service.get_visible_ticket(db, actor, ticket_id)


@router.get("/{ticket_id}/responses", response_model=list[TicketResponseOut])
def responses(ticket_id: str, actor: Actor = Depends(get_call_center_actor), db: Session = Depends(get_db)):
    return ticket_service.get_responses(db, actor, ticket_id)


@router.post("/{ticket_id}/assign", response_model=TicketOut)
def assign(
    ticket_id: str,
    payload: TicketAssign | None = None,
    actor: Actor = Depends(get_call_center_actor),
    db: Session = Depends(get_db),
):
    agent_id = payload.agent_id if payload else None
    return ticket_service.assign_ticket(db, actor, ticket_id, agent_id)


@router.post("/{ticket_id}/responses", response_model=TicketResponseOut, status_code=201)
def respond(
    ticket_id: str,
    payload: TicketRespond,
    actor: Actor = Depends(get_call_center_actor),
    db: Session = Depends(get_db),
):
    return ticket_service.respond(db, actor, ticket_id, payload.message, internal=payload.internal)


@router.post("/{ticket_id}/resolve", response_model=TicketOut)
def resolve(
    ticket_id: str,
    payload: TicketResolve | None = None,
    actor: Actor = Depends(get_call_center_actor),
    db: Session = Depends(get_db),
):
    return ticket_service.resolve_ticket(db, actor, ticket_id, payload.resolution_notes if payload else None)


@router.post("/{ticket_id}/close", response_model=TicketOut)
def close(
    ticket_id: str,
    payload: TicketResolve | None = None,
    actor: Actor = Depends(get_call_center_actor),
    db: Session = Depends(get_db),
):
    return ticket_service.close_ticket(db, actor, ticket_id, payload.resolution_notes if payload else None)
