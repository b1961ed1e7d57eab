# app/escalation/routes.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.session import Actor, get_call_center_actor
from app.escalation import services as escalation_service
from app.escalation.models import EscalationStatus
from app.escalation.schemas import EscalationAcknowledge, EscalationCreate, EscalationCreated, EscalationOut
from app.ticket.schemas import TicketOut
from app.views.intervals import View, poll_hint

router = APIRouter(prefix="/escalations", tags=["Escalations"])


@router.get("/", response_model=list[EscalationOut], dependencies=[Depends(poll_hint(View.ESCALATIONS))])
def list_all(
    status: EscalationStatus | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    actor: Actor = Depends(get_call_center_actor),
    db: Session = Depends(get_db),
):
    return escalation_service.list_escalations(db, status=status, limit=limit)


@router.get(
    "/urgent-tickets",
    response_model=list[TicketOut],
    dependencies=[Depends(poll_hint(View.URGENT_TICKETS))],
)
def urgent_tickets(
    limit: int = Query(default=100, ge=1, le=500),
    actor: Actor = Depends(get_call_center_actor),
    db: Session = Depends(get_db),
):
    return escalation_service.urgent_tickets(db, limit=limit)


@router.post("/", response_model=EscalationCreated, status_code=201)
def create(payload: EscalationCreate, actor: Actor = Depends(get_call_center_actor), db: Session = Depends(get_db)):
    escalation, code = escalation_service.escalate(db, actor, payload.ticket_id, payload.reason)
    return {"escalation": escalation, "code": code}


@router.get("/{escalation_id}", response_model=EscalationOut)
def get(escalation_id: str, actor: Actor = Depends(get_call_center_actor), db: Session = Depends(get_db)):
    return escalation_service.get_escalation_or_404(db, escalation_id)


@router.post("/{escalation_id}/acknowledge", response_model=EscalationOut)
def acknowledge(
    escalation_id: str,
    payload: EscalationAcknowledge,
    actor: Actor = Depends(get_call_center_actor),
    db: Session = Depends(get_db),
):
    return escalation_service.acknowledge(db, actor, escalation_id, payload.code)


@router.post("/{escalation_id}/resolve", response_model=EscalationOut)
def resolve(escalation_id: str, actor: Actor = Depends(get_call_center_actor), db: Session = Depends(get_db)):
    return escalation_service.resolve(db, actor, escalation_id)
