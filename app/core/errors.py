# app/core/errors.py
"""
Workflow error taxonomy.

Services raise these; ``register_exception_handlers`` turns them into JSON
responses so a failed action leaves state unchanged and the caller just
gets a message back. Nothing here is retried.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError

from app.core.logger import get_logger

logger = get_logger(__name__)


class WorkflowError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "workflow_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(WorkflowError):
    status_code = 422
    code = "validation_error"


class Unauthenticated(WorkflowError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"


class Forbidden(WorkflowError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class NotAssignedAgent(Forbidden):
    code = "not_assigned_agent"


class NotFound(WorkflowError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class StateViolation(WorkflowError):
    status_code = status.HTTP_409_CONFLICT
    code = "state_violation"


class AlreadyAssigned(StateViolation):
    code = "already_assigned"


class TicketClosed(StateViolation):
    code = "ticket_closed"


class AlreadyEscalated(StateViolation):
    code = "already_escalated"


class EscalationNotPending(StateViolation):
    code = "escalation_not_pending"


class EscalationNotAcknowledged(StateViolation):
    code = "escalation_not_acknowledged"


class InvalidCode(WorkflowError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_code"


class CodeExpired(InvalidCode):
    code = "code_expired"


class StoreUnavailable(WorkflowError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "store_unavailable"


async def workflow_error_handler(request: Request, exc: WorkflowError) -> JSONResponse:
    if isinstance(exc, StoreUnavailable):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.code},
    )


async def store_error_handler(request: Request, exc: DBAPIError) -> JSONResponse:
    # Reads fail outside of commit(); same answer as a failed write
    return await workflow_error_handler(
        request, StoreUnavailable("The data store is unavailable, please retry")
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WorkflowError, workflow_error_handler)
    app.add_exception_handler(DBAPIError, store_error_handler)


__all__ = [
    "WorkflowError",
    "ValidationError",
    "Unauthenticated",
    "Forbidden",
    "NotAssignedAgent",
    "NotFound",
    "StateViolation",
    "AlreadyAssigned",
    "TicketClosed",
    "AlreadyEscalated",
    "EscalationNotPending",
    "EscalationNotAcknowledged",
    "InvalidCode",
    "CodeExpired",
    "StoreUnavailable",
    "register_exception_handlers",
]
