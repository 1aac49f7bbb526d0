"""Pytest fixtures for async FastAPI testing.

Loads `.env.test` before any application module reads settings, creates a
clean test database, and provides an `AsyncClient` bound to a fresh app.
Process-wide singletons (open wizards, the mirror outbox, the in-memory
document store) are reset for every test.
"""
import os
import pathlib
import uuid

import pytest
from dotenv import load_dotenv

ROOT = pathlib.Path(__file__).resolve().parent.parent
dotenv_path = ROOT / ".env.test"
if dotenv_path.exists():
    load_dotenv(dotenv_path=str(dotenv_path), override=True)
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_vetconnect.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DOCUMENT_STORE_BACKEND", "memory")
os.environ.setdefault("RATE_LIMIT_ENABLED", "False")


@pytest.fixture(scope="session")
def prepare_database():
    """Create clean schema for the test session."""
    from vetconnect.core.database import engine, Base

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    yield

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(prepare_database):
    """Yield a SQLAlchemy session for direct DB access in tests."""
    from vetconnect.core.database import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    import vetconnect.dependencies.rate_limit as rate_limit
    import vetconnect.services.document_store as document_store
    import vetconnect.services.mirror_outbox as mirror_outbox
    from vetconnect.services.wizard_service import wizard_registry

    monkeypatch.setattr(document_store, "_document_store", None)
    monkeypatch.setattr(mirror_outbox, "_outbox", None)
    rate_limit._buckets.clear()
    wizard_registry._wizards.clear()
    yield
    wizard_registry._wizards.clear()


@pytest.fixture
def owner_id():
    # a fresh owner per test keeps local stores isolated without truncating
    return f"owner-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def owner(owner_id):
    return {"sub": owner_id, "name": "Dr. Maria Santos", "email": "maria@example.com", "user_type": "clinic_owner"}


@pytest.fixture
def auth_headers(owner_id):
    from vetconnect.core.security import create_access_token

    token = create_access_token(owner_id, name="Dr. Maria Santos", email="maria@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def pet_owner_headers():
    from vetconnect.core.security import create_access_token

    token = create_access_token(f"pet-{uuid.uuid4().hex[:8]}", user_type="pet_owner")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def app(prepare_database):
    from vetconnect.main import create_app

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def async_client(app):
    """Provide an httpx AsyncClient configured with the FastAPI app."""
    from httpx import ASGITransport, AsyncClient

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
