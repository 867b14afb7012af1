"""Pytest bootstrap for project imports and shared fixtures."""

from decimal import Decimal
from pathlib import Path
import sys

import pytest

# Ensure project root is on sys.path so `import app` works
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from app.config import settings  # noqa: E402
from app.crud.user import full_availability  # noqa: E402
from app.database import Base  # noqa: E402
from app.models.booking import Booking  # noqa: E402
from app.models.user import User, UserProfile, UserStats  # noqa: E402


# ======================
# TEST DATABASE SETUP
# ======================

@pytest.fixture
def db_session():
    """Fresh in-memory database per test"""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture(autouse=True)
def mock_payments_on(monkeypatch):
    monkeypatch.setattr(settings, "MOCK_PAYMENTS_ENABLED", True)
    monkeypatch.setattr(settings, "PAYMENT_CURRENCY", "usd")


# ======================
# FACTORIES
# ======================

@pytest.fixture
def make_user(db_session):
    """Create a user with profile and stats rows, skipping password hashing."""
    counter = {"n": 0}

    def _make(role="student", name=None, **profile_fields):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"{role.title()} {n}",
            email=f"{role}{n}@test.com",
            password_hash="hash",
            role=role,
            is_active=profile_fields.pop("is_active", True),
        )
        db_session.add(user)
        db_session.flush()

        profile_fields.setdefault("hourly_rate", Decimal("25.00"))
        profile_fields.setdefault("availability", full_availability([]))
        rating = profile_fields.pop("rating", 5.0)
        db_session.add(UserProfile(user_id=user.id, **profile_fields))
        db_session.add(UserStats(user_id=user.id, rating=rating))
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def student(make_user):
    return make_user("student", name="Ana Student")


@pytest.fixture
def trainer(make_user):
    return make_user("trainer", name="Tom Trainer", hourly_rate=Decimal("25.00"))


@pytest.fixture
def make_paid_booking(db_session):
    """Insert a booking that has already settled, bypassing the gateway."""
    counter = {"n": 0}

    def _make(student, trainer, amount=Decimal("25.00"), session_id=None):
        counter["n"] += 1
        booking = Booking(
            student_id=student.id,
            trainer_id=trainer.id,
            student_name=student.name,
            status="pending",
            payment_status="completed",
            payment_method="mock",
            amount=amount,
            currency="usd",
            payment_id=f"mock_{counter['n']:032x}",
            session_id=session_id,
        )
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)
        return booking

    return _make
