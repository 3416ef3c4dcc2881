# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from typing import Any

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Keep the application engine off the filesystem during tests.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from medpress.api.v1.dependencies import get_actor, get_media_store
from medpress.db.session import Base
from medpress.db.session import get_db as app_get_session
from medpress.domain.actor import Actor, Role
from medpress.main import app as fastapi_app
from medpress.models import User
from medpress.services.content_service import ContentService

TEST_DB_URL = "sqlite://"

ACTOR_ID_HEADER = "X-Test-Actor-Id"
ACTOR_ROLE_HEADER = "X-Test-Actor-Role"

VALID_FIELDS: dict[str, Any] = {
    "title": "Managing seasonal allergies",
    "body": "Antihistamines and nasal sprays help most patients through spring.",
    "summary": "A short guide to allergy season.",
    "category": "health-tips",
    "tags": ["allergy", "spring"],
}


class FakeMediaStore:
    """Records discarded references instead of touching the filesystem."""

    def __init__(self, fail: bool = False) -> None:
        self.discarded: list[str] = []
        self.fail = fail

    def discard(self, ref: str) -> bool:
        self.discarded.append(ref)
        if self.fail:
            raise OSError("disk unavailable")
        return True


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def media_store() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture()
def service(db_session: Session, media_store: FakeMediaStore) -> ContentService:
    return ContentService(db_session, media_store)


def _make_user(db: Session, user_id: str, name: str, role: Role) -> User:
    user = User(id=user_id, name=name, role=role.value, specialty=None)
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def doctor(db_session: Session) -> Actor:
    _make_user(db_session, "0b3f1f5e-0000-4000-8000-000000000001", "Dr. Ada", Role.DOCTOR)
    return Actor(id="0b3f1f5e-0000-4000-8000-000000000001", role=Role.DOCTOR)


@pytest.fixture()
def reader(db_session: Session) -> Actor:
    _make_user(db_session, "0b3f1f5e-0000-4000-8000-000000000002", "Rita Reader", Role.READER)
    return Actor(id="0b3f1f5e-0000-4000-8000-000000000002", role=Role.READER)


@pytest.fixture()
def other_reader(db_session: Session) -> Actor:
    _make_user(db_session, "0b3f1f5e-0000-4000-8000-000000000003", "Omar Other", Role.READER)
    return Actor(id="0b3f1f5e-0000-4000-8000-000000000003", role=Role.READER)


@pytest.fixture()
def admin(db_session: Session) -> Actor:
    _make_user(db_session, "0b3f1f5e-0000-4000-8000-000000000004", "Alex Admin", Role.ADMIN)
    return Actor(id="0b3f1f5e-0000-4000-8000-000000000004", role=Role.ADMIN)


@pytest.fixture()
def anonymous() -> Actor:
    return Actor.anonymous()


@pytest.fixture()
def content_fields() -> dict[str, Any]:
    return dict(VALID_FIELDS)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


def _actor_from_headers(request: Request) -> Actor:
    role = request.headers.get(ACTOR_ROLE_HEADER)
    if not role:
        return Actor.anonymous()
    return Actor(id=request.headers.get(ACTOR_ID_HEADER), role=Role(role))


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    media_store: FakeMediaStore,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_actor] = _actor_from_headers
    app.dependency_overrides[get_media_store] = lambda: media_store
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_actor, None)
        app.dependency_overrides.pop(get_media_store, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _headers(actor: Actor) -> dict[str, str]:
    return {ACTOR_ID_HEADER: actor.id, ACTOR_ROLE_HEADER: actor.role.value}


@pytest.fixture()
def doctor_headers(doctor: Actor) -> dict[str, str]:
    """Request headers resolving to the doctor actor."""
    return _headers(doctor)


@pytest.fixture()
def reader_headers(reader: Actor) -> dict[str, str]:
    return _headers(reader)


@pytest.fixture()
def other_reader_headers(other_reader: Actor) -> dict[str, str]:
    return _headers(other_reader)


@pytest.fixture()
def admin_headers(admin: Actor) -> dict[str, str]:
    return _headers(admin)
