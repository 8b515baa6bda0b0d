import os
# Override DATABASE_URL before any app imports to avoid PostgreSQL driver requirement
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["CLAUDE_MODEL"] = "claude-3-5-haiku-latest"
os.environ["DEPLOYMENT_ENV"] = "test"
os.environ.pop("SENTRY_DSN", None)

import json
import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from prompt_judge.platform.database import Base, get_db
from prompt_judge.main import app
from prompt_judge.platform.middleware import _rate_limit_store
from prompt_judge.components.integrations.claude.service import get_analysis_client_factory
from prompt_judge.models.user import User
from prompt_judge.shared.utils import utcnow

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Enable foreign key support for SQLite
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# ---------------------------------------------------------------------------
# Fake analysis model
# ---------------------------------------------------------------------------

DEFAULT_ANALYSIS_PAYLOAD = {
    "promptResult": "A clear, friendly explanation of why the sky looks blue.",
    "response": "The prompt is specific and approachable with a well-defined question.",
    "scores": {"style": 72, "grammar": 85, "creativity": 60, "clarity": 88, "relevance": 80},
    "suggestions": [
        "Name the audience you want the answer for.",
        "Say how long the answer should be.",
    ],
}


class FakeAnalysisClient:
    """Stands in for the Claude client; records instructions, returns canned text."""

    def __init__(self, text=None, error=None):
        self.text = json.dumps(DEFAULT_ANALYSIS_PAYLOAD) if text is None else text
        self.error = error
        self.calls = []

    def complete(self, instruction, system):
        self.calls.append({"instruction": instruction, "system": system})
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def fake_model():
    """Route every analysis request to a ``FakeAnalysisClient``.

    Tests adjust ``fake_model.text`` or ``fake_model.error`` before calling.
    """
    fake = FakeAnalysisClient()
    app.dependency_overrides[get_analysis_client_factory] = lambda: (lambda: fake)
    yield fake
    app.dependency_overrides.pop(get_analysis_client_factory, None)


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    Base.metadata.create_all(bind=engine)
    # Clear in-memory rate limit state between tests to prevent 429 bleed-through
    _rate_limit_store.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    _rate_limit_store.clear()
    Base.metadata.drop_all(bind=engine)


# ---------------------------------------------------------------------------
# Factory helpers: create test entities quickly and consistently
# ---------------------------------------------------------------------------

_counter = 0

def _unique_id() -> str:
    global _counter
    _counter += 1
    return f"{_counter}-{uuid.uuid4().hex[:8]}"


def create_user(db, email=None, name="Test User") -> User:
    """Insert a user row directly. The row cannot log in."""
    user = User(
        email=email or f"user-{_unique_id()}@test.com",
        hashed_password="not-a-real-hash",
        is_active=True,
        is_superuser=False,
        is_verified=True,
        name=name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def register_user(client, email=None, password="TestPass123!", name="Test User"):
    """Register a user via the API. Returns the response."""
    email = email or f"user-{_unique_id()}@test.com"
    payload = {"email": email, "password": password, "name": name}
    return client.post("/api/v1/auth/register", json=payload)


def login_user(client, email, password="TestPass123!"):
    """Log in a user via the API (FastAPI-Users JWT). Returns the response."""
    return client.post(
        "/api/v1/auth/jwt/login",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )


def auth_headers(client, email=None, password="TestPass123!", name="Test User"):
    """Register and login a user and return Authorization headers + email.

    Returns (headers_dict, email) tuple.
    """
    email = email or f"user-{_unique_id()}@test.com"
    reg = register_user(client, email=email, password=password, name=name)
    assert reg.status_code == 201, f"Registration failed: {reg.text}"
    login_resp = login_user(client, email, password)
    assert login_resp.status_code == 200, f"Login failed: {login_resp.text}"
    token = login_resp.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}, email


def user_id_for(email: str) -> int:
    db = TestingSessionLocal()
    try:
        return db.query(User).filter(User.email == email).one().id
    finally:
        db.close()


def analyze_via_api(client, headers=None, prompt="Explain why the sky is blue in simple terms", mode="casual"):
    return client.post("/api/v1/analyze", json={"prompt": prompt, "mode": mode}, headers=headers or {})


def create_post_via_api(client, headers, **overrides):
    """Create a community post via the API. Returns the response."""
    payload = {
        "title": overrides.get("title", f"Post-{_unique_id()}"),
        "content": overrides.get("content", "Sharing a prompt that worked well for me."),
        "prompt": overrides.get("prompt", "Explain recursion to a ten year old"),
        "category": overrides.get("category", "technical"),
    }
    payload.update({k: v for k, v in overrides.items() if k not in payload})
    return client.post("/api/v1/posts", json=payload, headers=headers)


def create_template_via_api(client, headers, **overrides):
    """Create a template via the API. Returns the response."""
    payload = {
        "title": overrides.get("title", f"Template-{_unique_id()}"),
        "content": overrides.get("content", "Act as a [role]. Explain [topic] for [audience]."),
        "category": overrides.get("category", "technical"),
        "difficulty": overrides.get("difficulty", "beginner"),
        "tags": overrides.get("tags", ["explain", "teaching"]),
    }
    payload.update({k: v for k, v in overrides.items() if k not in payload})
    return client.post("/api/v1/templates", json=payload, headers=headers)


def create_challenge_via_api(client, headers, deadline=None, **overrides):
    """Create a challenge via the API. Returns the response."""
    deadline = deadline or (utcnow() + timedelta(days=7))
    payload = {
        "title": overrides.get("title", f"Challenge-{_unique_id()}"),
        "description": overrides.get("description", "Write the clearest prompt for a recipe generator."),
        "prompt": overrides.get("prompt", "Generate a weeknight dinner recipe"),
        "category": overrides.get("category", "casual"),
        "deadline": deadline.isoformat(),
    }
    payload.update({k: v for k, v in overrides.items() if k not in payload})
    return client.post("/api/v1/challenges", json=payload, headers=headers)
