# app/views/routes.py
from fastapi import APIRouter, Depends

from app.core.config import Settings, get_settings
from app.views.intervals import all_intervals

router = APIRouter(prefix="/views", tags=["Views"])


@router.get("/")
def refresh_table(settings: Settings = Depends(get_settings)):
    """Poll interval, in seconds, for each console view."""
    return {"refresh_intervals": all_intervals(settings)}
