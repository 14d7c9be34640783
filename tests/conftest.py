"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import Generator
from typing import Any, Dict, Optional

# Cheap hashing and a throwaway data directory; set before config is imported.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="study-tracker-"))
os.environ.setdefault("STORE_BACKEND", "local")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import app
from core.context import StudyContext
from core.dependencies import get_entity_store
from models.base import Base
from utils.entity_store import EntityStore
from utils.key_value_storage import JsonFileStorage
from utils.local_store import LocalEntityStore
from utils.sql_store import SqlEntityStore
from utils.tutor_client import TutorClient, get_tutor_client
from utils.user_manager import UserManager


class FakeReply:
    def __init__(self, content: Any):
        self.content = content


class FakeLLM:
    """Records the messages it was asked about and answers with ``reply``."""

    def __init__(self, reply: Any = "Cells are the basic unit of life.", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls = []

    def invoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return FakeReply(self.reply)


@pytest.fixture
def local_store(tmp_path) -> LocalEntityStore:
    """A local store over a fresh storage directory."""
    return LocalEntityStore(JsonFileStorage(tmp_path / "local_storage"))


@pytest.fixture
def sql_store() -> Generator[SqlEntityStore, None, None]:
    """A database store over a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield SqlEntityStore(session_factory)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(params=["local", "database"])
def store(request) -> EntityStore:
    """Each test using this fixture runs once per backend."""
    if request.param == "local":
        return request.getfixturevalue("local_store")
    return request.getfixturevalue("sql_store")


def make_user(store: EntityStore, email: str, role: str, password: str = "secret") -> StudyContext:
    """Register a user without remembering them and return their context."""
    user = UserManager(store).sign_up(
        email, password, email.split("@")[0], role, remember=False
    )
    return StudyContext(user=user)


@pytest.fixture
def teacher(store: EntityStore) -> StudyContext:
    return make_user(store, "teacher@school.edu", "teacher")


@pytest.fixture
def student(store: EntityStore) -> StudyContext:
    return make_user(store, "student@school.edu", "student")


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def client(local_store: LocalEntityStore, fake_llm: FakeLLM) -> Generator[TestClient, Any, None]:
    """Create a test client over a local store and a fake chat model."""
    tutor = TutorClient(llm_factory=lambda: fake_llm)

    app.dependency_overrides[get_entity_store] = lambda: local_store
    app.dependency_overrides[get_tutor_client] = lambda: tutor

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def register(
    client: TestClient,
    email: str,
    role: str = "student",
    password: str = "secret",
    username: Optional[str] = None,
) -> Dict[str, str]:
    """Register through the API and return auth headers."""
    response = client.post(
        "/api/auth/register",
        json={
            "email": email,
            "password": password,
            "username": username or email.split("@")[0],
            "role": role,
        },
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}
