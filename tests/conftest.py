"""Shared fixtures: in-memory database, signed-in caller override and a fresh suggestion cache per test."""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["AUTH_JWT_PUBLIC_KEY"] = ""
os.environ["AUTH_JWT_ISSUER"] = ""
os.environ["REDIS_URL"] = ""
os.environ["NUCLIA_PERSIST_SECRET"] = "test-persist-secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import edubox.models  # noqa: E402,F401 - load models
from edubox.auth import resolve_identity  # noqa: E402
from edubox.database import Base, get_db, get_session_factory  # noqa: E402
from edubox.main import app  # noqa: E402
from edubox.routers.chat import get_suggestion_cache  # noqa: E402
from edubox.schemas.identity import Identity  # noqa: E402
from edubox.services.suggestion_cache import InMemorySuggestionCache  # noqa: E402

TEST_USER_ID = "user_1"
PERSIST_SECRET_HEADER = {"x-nuclia-persist-secret": "test-persist-secret"}


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def suggestion_cache():
    return InMemorySuggestionCache(ttl_ms=60_000)


@pytest.fixture
def client(session_factory, suggestion_cache):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_suggestion_cache] = lambda: suggestion_cache
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def signed_in(client):
    """Make every request come from TEST_USER_ID. Returns a setter to switch the caller."""
    def _as(user_id: str | None = TEST_USER_ID, **fields):
        app.dependency_overrides[resolve_identity] = lambda: Identity(user_id=user_id, **fields)

    _as(TEST_USER_ID, email="student@example.edu", name="Sam Student")
    return _as


@pytest.fixture
def rows(session_factory):
    """All rows of a model, read in a fresh session (after background writes have finished)."""
    def _rows(model):
        db = session_factory()
        try:
            return db.query(model).all()
        finally:
            db.close()

    return _rows


@pytest.fixture
def seed(session_factory):
    def _seed(*objects):
        db = session_factory()
        try:
            db.add_all(objects)
            db.commit()
        finally:
            db.close()

    return _seed
