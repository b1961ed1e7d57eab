# tests/conftest.py
import os

# Keep the module-level engine in memory; each test gets its own database below
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.access.roles import AdminRole, CallCenterRole
from app.admin.models import AdminProfile
from app.agent.models import Agent
from app.core.database import Base, get_db
from app.core.session import Actor
from app.main import app
from app.ticket.models import Ticket, TicketPriority


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _actor(row) -> Actor:
    return Actor(id=row.id, name=row.name, email=row.email, role=row.role)


@pytest.fixture
def make_actor(db):
    """Insert a call-center user and return its Actor."""
    counter = {"n": 0}

    def _make(role: CallCenterRole = CallCenterRole.AGENT, name: str | None = None, is_active: bool = True) -> Actor:
        counter["n"] += 1
        name = name or f"{role.value}-{counter['n']}"
        agent = Agent(email=f"{name}@ridedesk.test", name=name, role=role, is_active=is_active)
        db.add(agent)
        db.commit()
        db.refresh(agent)
        return _actor(agent)

    return _make


@pytest.fixture
def make_admin(db):
    """Insert a dashboard admin profile and return its Actor."""
    counter = {"n": 0}

    def _make(role: AdminRole = AdminRole.OPERATIONS_STAFF, name: str | None = None) -> Actor:
        counter["n"] += 1
        name = name or f"{role.value}-{counter['n']}"
        admin = AdminProfile(email=f"{name}@dashboard.test", name=name, role=role)
        db.add(admin)
        db.commit()
        db.refresh(admin)
        return _actor(admin)

    return _make


@pytest.fixture
def make_ticket(db):
    def _make(subject: str = "Driver took a long route", priority: TicketPriority = TicketPriority.NORMAL, **extra) -> Ticket:
        ticket = Ticket(subject=subject, message=extra.pop("message", "Details from the rider"), priority=priority, **extra)
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
        return ticket

    return _make
