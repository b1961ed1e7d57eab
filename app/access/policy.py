# app/access/policy.py
"""
Who may do what.

Every workflow service calls into this module before touching the store, so
the rules hold no matter which client issued the request. Checks raise
``Forbidden`` (or its ``NotAssignedAgent`` subclass) and return ``None`` on
success.
"""
from app.access.roles import CallCenterRole, RankedRole
from app.core.errors import Forbidden, NotAssignedAgent
from app.core.session import Actor


def is_supervisor_or_above(actor: Actor) -> bool:
    return actor.role >= type(actor.role).SUPERVISOR


def require_escalation_rights(actor: Actor, action: str) -> None:
    """Only supervisors and admins act on escalations; agents may only view them."""
    if not isinstance(actor.role, CallCenterRole) or not is_supervisor_or_above(actor):
        raise Forbidden(f"Role '{actor.role.value}' may not {action} escalations")


def require_account_management(actor: Actor, target_role: RankedRole, action: str) -> None:
    """
    Account management inside one role hierarchy.

    The top role manages everyone, a supervisor manages strictly lower roles,
    the lowest role manages nobody.
    """
    role_type = type(actor.role)
    if type(target_role) is not role_type:
        raise TypeError(
            f"{role_type.__name__} actor cannot manage a {type(target_role).__name__} account"
        )
    if actor.role == role_type.top():
        return
    if actor.role >= role_type.SUPERVISOR and target_role < actor.role:
        return
    raise Forbidden(
        f"Role '{actor.role.value}' may not {action} '{target_role.value}' accounts"
    )


def require_not_self_lockout(actor: Actor, target_id: str, *, deactivating: bool, new_role: RankedRole | None = None) -> None:
    """A top-role actor can neither deactivate nor demote their own account."""
    if actor.id != target_id or actor.role != type(actor.role).top():
        return
    if deactivating:
        raise Forbidden("Top-level administrators cannot deactivate their own account")
    if new_role is not None and new_role != actor.role:
        raise Forbidden("Top-level administrators cannot demote their own account")


def require_ticket_handler(actor: Actor, assigned_agent_id: str | None, action: str) -> None:
    """Tickets are handled by their assigned agent or anyone at supervisor level and above."""
    if is_supervisor_or_above(actor):
        return
    if assigned_agent_id is None or assigned_agent_id != actor.id:
        raise NotAssignedAgent(f"Only the assigned agent may {action} this ticket")


def require_assignment_rights(actor: Actor, target_agent_id: str) -> None:
    """Agents can only pick tickets up for themselves."""
    if target_agent_id != actor.id and not is_supervisor_or_above(actor):
        raise Forbidden("Agents may only assign tickets to themselves")
