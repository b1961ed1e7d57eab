# app/core/database.py
import uuid

from sqlalchemy import create_engine
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import get_settings
from app.core.errors import StoreUnavailable, ValidationError
from app.core.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def enum_values(enum_cls):
    # Store enum values, not member names
    return [member.value for member in enum_cls]


# Common DB dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit(db: Session) -> None:
    """Commit, turning driver/transport failures into ``StoreUnavailable``."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Store rejected write: %s", exc.orig)
        raise ValidationError("Write conflicts with an existing record") from exc
    except DBAPIError as exc:
        db.rollback()
        logger.error("Store commit failed: %s", exc)
        raise StoreUnavailable("The data store is unavailable, please retry") from exc
