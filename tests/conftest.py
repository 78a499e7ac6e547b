# tests/conftest.py
import os
import tempfile

# Point the app at a throwaway SQLite file before anything imports config
_tmp_dir = tempfile.mkdtemp(prefix="readinghub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_tmp_dir}/readinghub_test.db"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["GEMINI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from auth import create_token
from database import Base, SessionLocal, engine
from main import app
from services.user_service import UserService


@pytest.fixture(autouse=True)
def reset_db():
    """Recreate the schema so every test starts from an empty database."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def user(db_session):
    return UserService.register(db_session, "reader@example.com", "secret123", "Test Reader")


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_token(user.id, user.email)}"}


@pytest.fixture
def other_headers(db_session):
    other = UserService.register(db_session, "other@example.com", "secret123", "Other Reader")
    return {"Authorization": f"Bearer {create_token(other.id, other.email)}"}


@pytest.fixture
def create_book(client, auth_headers):
    """Factory posting a book through the API and returning its JSON."""
    def _create(**overrides):
        payload = {"title": "Dune", "author": "Frank Herbert", "pages": 300, "genre": ["Science Fiction"]}
        payload.update(overrides)
        response = client.post("/api/v1/books", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create
