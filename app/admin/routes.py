# app/admin/routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.admin import services as admin_service
from app.admin.schemas import AdminCreate, AdminOut, AdminRoleUpdate, AdminStatusUpdate
from app.core.database import get_db
from app.core.session import Actor, get_admin_actor

router = APIRouter(prefix="/admins", tags=["Admins"])


@router.get("/", response_model=list[AdminOut])
def list_all(actor: Actor = Depends(get_admin_actor), db: Session = Depends(get_db)):
    return admin_service.get_all_admins(db)


@router.post("/", response_model=AdminOut, status_code=201)
def create(payload: AdminCreate, actor: Actor = Depends(get_admin_actor), db: Session = Depends(get_db)):
    return admin_service.create_admin(db, actor, payload)


@router.put("/{admin_id}/status", response_model=AdminOut)
def update_status(
    admin_id: str,
    payload: AdminStatusUpdate,
    actor: Actor = Depends(get_admin_actor),
    db: Session = Depends(get_db),
):
    return admin_service.set_admin_active(db, actor, admin_id, payload.is_active)


@router.put("/{admin_id}/role", response_model=AdminOut)
def update_role(
    admin_id: str,
    payload: AdminRoleUpdate,
    actor: Actor = Depends(get_admin_actor),
    db: Session = Depends(get_db),
):
    return admin_service.set_admin_role(db, actor, admin_id, payload.role)
