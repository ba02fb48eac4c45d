from datetime import datetime
import os
from pathlib import Path
import sys
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_SECRET", "test-auth-secret")

sys.path.append(str(Path(__file__).resolve().parents[1]))

from career_transition.api.deps import get_db
from career_transition.core.database import Base, SessionLocal, engine
from career_transition.core.ratelimit import ai_rate_limiter, auth_login_rate_limiter
from career_transition.main import app
from career_transition.models import entities  # noqa: F401
from career_transition.models.entities import CareerPlan, IntakeSession, ProgressTracking
from career_transition.services import agents as agents_service
from career_transition.services import intake as intake_service
from career_transition.services import plans as plans_service
from career_transition.services.llm import LLMError


SAMPLE_PHASES = [
    {
        "phaseNumber": 1,
        "title": "Foundation",
        "duration": "2 months",
        "description": "Build the basics",
        "milestones": [
            {
                "id": "m1",
                "title": "Learn fundamentals",
                "description": "Courses and reading",
                "tasks": [
                    {"id": "t1", "title": "Take a course", "description": "", "estimatedHours": 10},
                    {"id": "t2", "title": "Read a book", "description": "", "estimatedHours": 6},
                ],
            },
        ],
    },
    {
        "phaseNumber": 2,
        "title": "Practice",
        "duration": "3 months",
        "description": "Ship something",
        "milestones": [
            {
                "id": "m2",
                "title": "Portfolio project",
                "description": "Build and publish",
                "tasks": [
                    {"id": "t3", "title": "Build project", "description": "", "estimatedHours": 40},
                ],
            },
        ],
    },
]


class FakeLLM:
    """Stands in for ``send_message``; replies are consumed in order."""

    def __init__(self):
        self.replies = []
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)

    def __call__(self, system_prompt, messages, max_tokens=4096):
        self.calls.append(
            {"system": system_prompt, "messages": list(messages), "max_tokens": max_tokens}
        )
        if not self.replies:
            raise LLMError("No fake reply queued")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    ai_rate_limiter.reset()
    auth_login_rate_limiter.reset()
    yield


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def fake_llm(monkeypatch):
    fake = FakeLLM()
    monkeypatch.setattr(intake_service, "send_message", fake)
    monkeypatch.setattr(plans_service, "send_message", fake)
    monkeypatch.setattr(agents_service, "send_message", fake)
    return fake


def register(client, email="ada@example.com", name="Ada", password="password123"):
    response = client.post(
        "/api/auth/register",
        json={"email": email, "name": name, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth(client):
    payload = register(client)
    return {
        "user_id": payload["user"]["id"],
        "headers": {"Authorization": f"Bearer {payload['token']}"},
    }


def create_completed_session(db, user_id, collected_data=None):
    session = IntakeSession(
        user_id=UUID(user_id),
        conversation_history=[{"role": "assistant", "content": "Done", "timestamp": None}],
        current_step=8,
        is_complete=True,
        collected_data=collected_data or {"currentRole": "Teacher", "targetRole": "Data Analyst"},
    )
    db.add(session)
    db.commit()
    return session


def create_plan(db, user_id, phases=None, *, completed=None, streak=0, last_activity=None):
    plan = CareerPlan(
        user_id=UUID(user_id),
        target_role="Data Analyst",
        current_role="Teacher",
        timeline="12 months",
        phases=phases if phases is not None else SAMPLE_PHASES,
    )
    db.add(plan)
    db.flush()
    progress = ProgressTracking(
        user_id=UUID(user_id),
        plan_id=plan.id,
        completed_tasks=list(completed or []),
        current_phase=0,
        streak_days=streak,
        last_activity=last_activity or datetime.utcnow(),
        activity_log={},
    )
    db.add(progress)
    db.commit()
    return plan, progress
