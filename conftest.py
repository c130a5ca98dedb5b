"""
Shared pytest fixtures for the scheduler API tests.

Each test gets its own SQLite file and its own settings, wired into the
app through FastAPI dependency overrides.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from config.settings import Settings, get_settings
from database import get_db
from limiter import limiter
from main import app
from models import Base

TODO_ENV = (
    "TODO_HOST",
    "TODO_PORT",
    "TODO_DBFILE",
    "TODO_WEBDIR",
    "TODO_PASSWORD",
    "TODO_SECRETKEY",
    "TODO_TASKS_LIMIT",
    "TODO_MAX_UPLOAD_SIZE",
    "TODO_TOKEN_TTL_HOURS",
    "TODO_SIGNIN_RATE_LIMIT",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every TODO_* variable so Settings() starts from defaults."""
    for name in TODO_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def settings(clean_env, tmp_path):
    clean_env.setenv("TODO_DBFILE", str(tmp_path / "scheduler.db"))
    return Settings()


@pytest.fixture
def session_factory(settings):
    engine = create_engine(settings.DATABASE_URL, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(settings, session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()
