# app/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.admin import services as admin_service
from app.admin.routes import router as admin_router
from app.agent import services as agent_service
from app.agent.routes import router as agent_router
from app.core.config import get_settings
from app.core.database import Base, SessionLocal, engine
from app.core.errors import register_exception_handlers
from app.core.logger import get_logger, setup_logging
from app.escalation.routes import router as escalation_router
from app.ticket.routes import router as ticket_router
from app.views.routes import router as views_router

setup_logging()
logger = get_logger(__name__)

Base.metadata.create_all(bind=engine)

settings = get_settings()


def bootstrap_accounts() -> None:
    if not (settings.BOOTSTRAP_ADMIN_EMAIL or settings.BOOTSTRAP_ROOT_ADMIN_EMAIL):
        return
    db = SessionLocal()
    try:
        if settings.BOOTSTRAP_ADMIN_EMAIL:
            agent_service.ensure_bootstrap_admin(db, settings.BOOTSTRAP_ADMIN_EMAIL, settings.BOOTSTRAP_ADMIN_NAME)
        if settings.BOOTSTRAP_ROOT_ADMIN_EMAIL:
            admin_service.ensure_bootstrap_root_admin(
                db, settings.BOOTSTRAP_ROOT_ADMIN_EMAIL, settings.BOOTSTRAP_ROOT_ADMIN_NAME
            )
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    bootstrap_accounts()
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESC,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers
app.include_router(agent_router)
app.include_router(admin_router)
app.include_router(ticket_router)
app.include_router(escalation_router)
app.include_router(views_router)


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}
