# app/admin/services.py
"""
Dashboard administrator accounts.

Same management rules as the call-center accounts, applied to the
``AdminRole`` hierarchy. These accounts do not write to the agent activity
log, which is keyed to call-center users.
"""
from sqlalchemy.orm import Session

from app.access import policy
from app.access.roles import AdminRole
from app.admin.models import AdminProfile
from app.admin.schemas import AdminCreate
from app.core.database import commit
from app.core.errors import NotFound, ValidationError
from app.core.logger import get_logger
from app.core.session import Actor

logger = get_logger(__name__)


def get_all_admins(db: Session) -> list[AdminProfile]:
    return db.query(AdminProfile).order_by(AdminProfile.created_at.desc()).all()


def get_admin_or_404(db: Session, admin_id: str) -> AdminProfile:
    admin = db.query(AdminProfile).filter(AdminProfile.id == admin_id).first()
    if admin is None:
        raise NotFound(f"Admin '{admin_id}' not found")
    return admin


def create_admin(db: Session, actor: Actor, payload: AdminCreate) -> AdminProfile:
    policy.require_account_management(actor, payload.role, "create")
    if db.query(AdminProfile).filter(AdminProfile.email == payload.email).first():
        raise ValidationError(f"An account for {payload.email} already exists")

    admin = AdminProfile(**payload.model_dump())
    db.add(admin)
    commit(db)
    db.refresh(admin)
    logger.info("Admin %s (%s) created by %s", admin.id, admin.role.value, actor.id)
    return admin


def set_admin_active(db: Session, actor: Actor, admin_id: str, is_active: bool) -> AdminProfile:
    admin = get_admin_or_404(db, admin_id)
    policy.require_account_management(actor, admin.role, "activate" if is_active else "deactivate")
    policy.require_not_self_lockout(actor, admin.id, deactivating=not is_active)

    admin.is_active = is_active
    commit(db)
    db.refresh(admin)
    logger.info("Admin %s %s by %s", admin.id, "activated" if is_active else "deactivated", actor.id)
    return admin


def set_admin_role(db: Session, actor: Actor, admin_id: str, role: AdminRole) -> AdminProfile:
    admin = get_admin_or_404(db, admin_id)
    policy.require_account_management(actor, admin.role, "change the role of")
    policy.require_account_management(actor, role, "grant")
    policy.require_not_self_lockout(actor, admin.id, deactivating=False, new_role=role)

    admin.role = role
    commit(db)
    db.refresh(admin)
    logger.info("Admin %s role set to %s by %s", admin.id, role.value, actor.id)
    return admin


def ensure_bootstrap_root_admin(db: Session, email: str, name: str) -> AdminProfile:
    admin = db.query(AdminProfile).filter(AdminProfile.email == email).first()
    if admin is None:
        admin = AdminProfile(email=email, name=name, role=AdminRole.ROOT_ADMIN)
        db.add(admin)
        commit(db)
        db.refresh(admin)
        logger.info("Bootstrap root admin %s created", email)
    return admin
