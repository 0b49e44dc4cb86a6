"""
Test configuration and fixtures for task list tests.

Provides:
- Test database with SQLite in-memory for speed
- FastAPI test client with database dependency override
- Session helpers (log a test client in as a given user)
- Common fixtures for users and tasks
"""

import os
import sys
import logging
from typing import Generator, List

# Keep the app's startup hook away from the on-disk default database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from database import Base, get_db
from main import app
import models
from auth.security import hash_password
from auth.sessions import create_session

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

# SQLite in-memory database for fast testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """
    Create a fresh in-memory SQLite database for each test.

    This ensures test isolation and fast execution.
    """
    logger.debug("Creating test database")

    engine = create_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        logger.debug("Test database cleaned up")


@pytest.fixture(scope="function")
def client(test_db: Session) -> TestClient:
    """
    Create FastAPI test client with database dependency override.
    """
    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_user(db: Session, name: str, email: str, password: str) -> models.User:
    """Persist a user with a real Argon2 hash."""
    user = models.User(name=name, email=email, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {email} with ID: {user.id}")
    return user


def make_task(
    db: Session,
    owner: models.User,
    name: str = "Task",
    collaborators: List[str] = (),
    is_complete: bool = False,
) -> models.Task:
    """Persist a task owned by `owner` with collaborators in the given order."""
    task = models.Task(owner_id=owner.id, name=name, description="", is_complete=is_complete)
    task.collaborators = [
        models.TaskCollaborator(position=i, email=email)
        for i, email in enumerate(collaborators, start=1)
    ]
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def login_as(client: TestClient, db: Session, user: models.User) -> str:
    """
    Attach a fresh session cookie for `user` to the test client.

    Returns:
        The session token
    """
    token = create_session(db, user)
    client.cookies.set(config.SESSION_COOKIE_NAME, token)
    return token


@pytest.fixture(scope="function")
def alice(test_db: Session) -> models.User:
    return make_user(test_db, "Alice", "alice@sample.com", "alice-pass-123")


@pytest.fixture(scope="function")
def bob(test_db: Session) -> models.User:
    return make_user(test_db, "Bob", "bob@sample.com", "bob-pass-123")


@pytest.fixture(scope="function")
def carol(test_db: Session) -> models.User:
    return make_user(test_db, "Carol", "carol@sample.com", "carol-pass-123")


@pytest.fixture(scope="function")
def alice_client(client: TestClient, test_db: Session, alice: models.User) -> TestClient:
    """Test client logged in as Alice."""
    login_as(client, test_db, alice)
    return client


@pytest.fixture(scope="function")
def participants_policy(monkeypatch):
    monkeypatch.setattr(config, "TASK_MUTATION_POLICY", "participants")


@pytest.fixture(scope="function")
def authenticated_policy(monkeypatch):
    monkeypatch.setattr(config, "TASK_MUTATION_POLICY", "authenticated")
