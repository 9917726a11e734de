"""Shared fixtures: an in-memory SQLite database behind the FastAPI app."""

import os

# Configure before anything imports sarradabet.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("EVENT_GATEWAY_URL", None)
os.environ.pop("KAFKA_BROKERS", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sarradabet.auth import generate_token, hash_password
from sarradabet.main import app
from sarradabet.models import Admin, Base, Bet, Category, Odd, Vote, get_db

# One connection shared by every thread so the in-memory database survives
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def _override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    # No context manager: lifespan (Kafka, startup DB probe) stays off
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Data builders
# ---------------------------------------------------------------------------

@pytest.fixture
def make_category(db):
    counter = {"n": 0}

    def _make(title=None):
        counter["n"] += 1
        category = Category(title=title or f"Category {counter['n']}")
        db.add(category)
        db.commit()
        db.refresh(category)
        return category
    return _make


@pytest.fixture
def make_bet(db, make_category):
    def _make(title="Who wins?", odds=(("Home", 2.0), ("Away", 3.0)), status="open", category=None):
        category = category or make_category()
        bet = Bet(title=title, status=status, category_id=category.id)
        bet.odds = [Odd(title=t, value=v) for t, v in odds]
        db.add(bet)
        db.commit()
        db.refresh(bet)
        return bet
    return _make


@pytest.fixture
def add_votes(db):
    def _add(odd_id, n=1):
        for _ in range(n):
            db.add(Vote(odd_id=odd_id))
        db.commit()
    return _add


@pytest.fixture
def admin(db):
    account = Admin(
        username="root_admin",
        email="root@example.com",
        password_hash=hash_password("s3cret!", iterations=1000),
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


@pytest.fixture
def auth_headers(admin):
    token = generate_token(admin.id, admin.username, admin.email)
    return {"Authorization": f"Bearer {token['access_token']}"}


@pytest.fixture
def session_factory(db):
    """Sessions bound to the test database, for code that opens its own."""
    return TestingSessionLocal
