# tests/conftest.py
"""
Shared fixtures: an in-memory SQLite database (one shared connection so the
TestClient's worker threads see the same data) and an app wired to it.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app.database import Base, create_tables, get_db, make_session_factory
from app.deps import get_identity_resolver
from app.main import create_app
from app.models.user import User
from app.models.vehicle import Vehicle
from app.services.exceptions import InvalidCredential
from app.services.identity_service import VerifiedSubject


class FakeResolver:
    """Accepts tokens of the form 'valid:<uid>'; rejects everything else."""

    def resolve(self, token):
        if not token.startswith("valid:"):
            raise InvalidCredential("Invalid Firebase token")
        uid = token.split(":", 1)[1]
        return VerifiedSubject(uid=uid, email=f"{uid}@example.com", name=None, picture=None)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    user = User(firebase_uid="owner-uid", email="owner@example.com", name="Owner", picture="")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def vehicle(db, user):
    vehicle = Vehicle(user_id=user.id, uuid="3f0c2a8e-0000-4000-8000-000000000001",
                      make="Toyota", model="Corolla", year=2015, license_plate="B-123-XYZ",
                      color="red", category="sedan")
    db.add(vehicle)
    db.commit()
    return vehicle


@pytest.fixture
def client(session_factory):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_resolver] = lambda: FakeResolver()
    return TestClient(app)
