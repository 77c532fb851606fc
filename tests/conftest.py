import os

# Must be set before any tasktracker import builds settings or the engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from tasktracker.core.auth import hash_password
from tasktracker.core.db.deps import get_db
from tasktracker.core.db.session import Base, SessionLocal, engine
from tasktracker.main import app
from tasktracker.models import Task, TaskPriority, TaskStatus, User, UserRole, UserSession

TEST_PASSWORD = "test_password_123"


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema per test on the in-memory SQLite database the app itself uses."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Test client with the database dependency pointed at the test session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_client(db_session):
    """Factory for independent clients (separate cookie jars) sharing one database."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    clients: list[TestClient] = []

    def _make() -> TestClient:
        test_client = TestClient(app)
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        test_client.close()
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_user(db_session):
    """Factory creating users; the plain password is kept on ``_plain_password``."""
    counter = {"n": 0}

    def _make(
        email: str | None = None,
        password: str = TEST_PASSWORD,
        role: UserRole = UserRole.USER,
        name: str | None = "Test User",
    ) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            hashed_password=hash_password(password),
            name=name,
            role=role.value,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        user._plain_password = password
        return user

    return _make


@pytest.fixture(scope="function")
def test_user(make_user):
    return make_user(email="owner@example.com", name="Owner")


@pytest.fixture(scope="function")
def other_user(make_user):
    return make_user(email="other@example.com", name="Other")


@pytest.fixture(scope="function")
def admin_user(make_user):
    return make_user(email="admin@example.com", name="Admin", role=UserRole.ADMIN)


@pytest.fixture(scope="function")
def make_task(db_session):
    """Factory creating tasks directly in the database."""

    def _make(
        owner: User,
        title: str = "Task",
        description: str | None = None,
        status: TaskStatus = TaskStatus.PENDING,
        priority: TaskPriority = TaskPriority.MEDIUM,
        created_at: datetime | None = None,
    ) -> Task:
        task = Task(
            title=title,
            description=description,
            status=status.value,
            priority=priority.value,
            user_id=owner.id,
            created_at=created_at or datetime.now(UTC),
        )
        db_session.add(task)
        db_session.commit()
        db_session.refresh(task)
        return task

    return _make


@pytest.fixture(scope="function")
def make_session(db_session):
    """Factory inserting a raw session row with a chosen expiry."""

    def _make(user: User, session_id: str, expires_in: timedelta = timedelta(days=30)) -> UserSession:
        row = UserSession(id=session_id, user_id=user.id, expires_at=datetime.now(UTC) + expires_in)
        db_session.add(row)
        db_session.commit()
        return row

    return _make


def _login(test_client: TestClient, user: User, selected_role: str | None = None):
    payload = {"email": user.email, "password": user._plain_password}
    if selected_role is not None:
        payload["selected_role"] = selected_role
    return test_client.post("/api/v1/auth/login", json=payload)


@pytest.fixture(scope="function")
def user_client(make_client, test_user):
    test_client = make_client()
    assert _login(test_client, test_user).status_code == 200
    return test_client


@pytest.fixture(scope="function")
def other_client(make_client, other_user):
    test_client = make_client()
    assert _login(test_client, other_user).status_code == 200
    return test_client


@pytest.fixture(scope="function")
def admin_client(make_client, admin_user):
    test_client = make_client()
    assert _login(test_client, admin_user).status_code == 200
    return test_client


@pytest.fixture
def login():
    """Log a user in on a client; the session cookie stays in that client's jar."""
    return _login
