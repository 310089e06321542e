"""
Shared fixtures: an in-memory database, user/task factories, fixed dates,
a stubbed AI collaborator and an API client wired to all of them.
"""
import os
import tempfile

# Point the app at throwaway storage before any family_tasks module reads its config
os.environ.setdefault("FAMILY_TASKS_DATABASE_URL", "sqlite://")
os.environ.setdefault("FAMILY_TASKS_LOG_DIR", os.path.join(tempfile.gettempdir(), "family-tasks-tests"))

import pytest
from datetime import date, timedelta
from unittest.mock import MagicMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from family_tasks.database import Base
from family_tasks.models import User, Task
from family_tasks.auth import hash_password, create_session_token
from family_tasks.schemas import VerificationResult
from family_tasks.services.ai_service import AIService
from family_tasks.constants import TASK_STATUS_PENDING


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def today():
    return date(2024, 1, 11)


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


def create_user(db, username="alice", password="secret", is_admin=False,
                points=0, streak=0, last_streak=None) -> User:
    user = User(
        username=username,
        password=hash_password(password),
        is_admin=is_admin,
        points=points,
        streak=streak,
        last_streak=last_streak,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_task(db, user, due_date, task_points=10, status=TASK_STATUS_PENDING,
                completed=False, penalty_applied=False, description="What is 6 x 7?") -> Task:
    task = Task(
        user_id=user.id,
        title=description[:100],
        description=description,
        due_date=due_date,
        task_points=task_points,
        status=status,
        completed=completed,
        penalty_applied=penalty_applied,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


@pytest.fixture
def user(db_session):
    return create_user(db_session)


@pytest.fixture
def admin(db_session):
    return create_user(db_session, username="parent", is_admin=True)


@pytest.fixture
def ai_service():
    """AI collaborator stub that grades every answer as correct unless told otherwise"""
    service = MagicMock(spec=AIService)
    service.verify_answer.return_value = VerificationResult(
        correct=True, explanation="Well done", confidence=0.9, hint=None
    )
    return service


def grade(ai_service, correct: bool):
    ai_service.verify_answer.return_value = VerificationResult(
        correct=correct,
        explanation="Well done" if correct else "Not quite",
        confidence=0.8,
        hint=None if correct else "Try multiplying again",
    )


class DayClock:
    """Mutable stand-in for the get_today dependency"""

    def __init__(self, day: date):
        self.day = day

    def __call__(self) -> date:
        return self.day


@pytest.fixture
def clock(today):
    return DayClock(today)


@pytest.fixture
def client(db_session, ai_service, clock):
    from fastapi.testclient import TestClient
    from family_tasks.main import app
    from family_tasks.database import get_db
    from family_tasks.dependencies import get_ai_service, get_today

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_service] = lambda: ai_service
    app.dependency_overrides[get_today] = clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def login_as(client, user: User) -> None:
    client.headers["Authorization"] = f"Bearer {create_session_token(user.id)}"
