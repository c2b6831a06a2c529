"""
Shared pytest fixtures.

Uses a SQLite database file so no Postgres is required for tests.
Each test creates its own agents/leads, so rows never collide across tests.
"""
import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from telesales.db.base import Base, get_db
from telesales.main import app
from telesales.models import AgentProfile, Lead

SQLITE_URL = "sqlite:///./test_telesales.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_contact_ids = itertools.count(1000)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_agent(db):
    def _make(name: str = "Test Agent", **streak) -> AgentProfile:
        agent = AgentProfile(full_name=name, **streak)
        db.add(agent)
        db.commit()
        db.refresh(agent)
        return agent
    return _make


@pytest.fixture()
def make_lead(db, make_agent):
    def _make(agent_id: int | None = None, **fields) -> Lead:
        if agent_id is None:
            agent_id = make_agent().id
        lead = Lead(contact_id=next(_contact_ids), agent_id=agent_id, **fields)
        db.add(lead)
        db.commit()
        db.refresh(lead)
        return lead
    return _make
