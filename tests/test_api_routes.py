# tests/test_api_routes.py
"""
Router-level workflow: route functions are called directly with the
current user and db session, the way FastAPI would after dependencies run.
"""

import pytest

pytest.importorskip("fastapi")

from fastapi import HTTPException

from app.api import bookings as bookings_api
from app.api import payments as payments_api
from app.api import review as review_api
from app.api import session as session_api
from app.api import users as users_api
from app.config import settings
from app.schemas import (
    BookingCreate,
    FakePaymentRequest,
    PaymentStatusUpdate,
    ReviewCreate,
    SessionCreate,
    SessionStatusUpdate,
    UserProfile,
    UserProfileUpdate,
)
from app.utils.security import require_role


def book_and_pay(db, student, trainer):
    booking = bookings_api.create_booking(
        BookingCreate(trainerId=trainer.id, studentName="Ana", paymentMethod="fake"),
        current_user=student,
        db=db,
    )
    payment = payments_api.fake_payment(FakePaymentRequest(amount=25), current_user=student)
    return bookings_api.update_payment_status(
        booking.id,
        PaymentStatusUpdate(paymentStatus="completed", paymentId=payment["payment_id"]),
        current_user=student,
        db=db,
    )


def test_full_marketplace_workflow(db_session, student, trainer):
    booking = book_and_pay(db_session, student, trainer)
    assert booking.payment_status == "completed"
    assert booking.payment_method == "mock"

    created = session_api.create_session(
        SessionCreate(bookingIds=[booking.id], title="Spanish A1", language="Spanish"),
        current_user=trainer,
        db=db_session,
    )
    assert created["students"] == [{"id": student.id, "name": student.name}]
    assert created["bookings"] == [booking.id]
    assert created["meeting_link"].endswith(created["meeting_room_id"])

    for step in ("active", "completed"):
        updated = session_api.update_session_status(
            created["id"], SessionStatusUpdate(status=step), current_user=trainer, db=db_session,
        )
    assert updated["status"] == "completed"

    review = review_api.submit_review(
        ReviewCreate(sessionId=created["id"], rating=5, comment="Muy bien"),
        current_user=student,
        db=db_session,
    )
    assert review.rating == 5

    summary = review_api.get_trainer_rating_summary(trainer.id, db=db_session)
    assert summary["total_reviews"] == 1
    assert summary["average_rating"] == 5.0

    assert [s["id"] for s in session_api.my_sessions(current_user=student, db=db_session)] == [created["id"]]
    assert len(review_api.get_session_reviews(created["id"], current_user=trainer, db=db_session)) == 1
    assert len(review_api.get_my_trainer_reviews(current_user=trainer, db=db_session)) == 1

    stats = users_api.get_stats(current_user=trainer, db=db_session)
    assert stats.total_bookings == 1
    assert stats.completed_sessions == 1


def test_second_payment_update_is_conflict(db_session, student, trainer):
    booking = book_and_pay(db_session, student, trainer)

    with pytest.raises(HTTPException) as exc:
        bookings_api.update_payment_status(
            booking.id, PaymentStatusUpdate(paymentStatus="failed"), current_user=student, db=db_session,
        )
    assert exc.value.status_code == 409


def test_review_before_completion_is_400(db_session, student, trainer):
    booking = book_and_pay(db_session, student, trainer)
    created = session_api.create_session(
        SessionCreate(bookingIds=[booking.id], title="Lesson"), current_user=trainer, db=db_session,
    )

    with pytest.raises(HTTPException) as exc:
        review_api.submit_review(
            ReviewCreate(sessionId=created["id"], rating=4), current_user=student, db=db_session,
        )
    assert exc.value.status_code == 400


def test_foreign_booking_in_session_is_403(db_session, student, trainer, make_user):
    booking = book_and_pay(db_session, student, trainer)
    other_trainer = make_user("trainer")

    with pytest.raises(HTTPException) as exc:
        session_api.create_session(
            SessionCreate(bookingIds=[booking.id], title="Lesson"), current_user=other_trainer, db=db_session,
        )
    assert exc.value.status_code == 403


def test_booking_lookup_codes(db_session, student, trainer, make_user):
    booking = book_and_pay(db_session, student, trainer)

    assert bookings_api.get_booking(booking.id, current_user=trainer, db=db_session).id == booking.id
    assert [b.id for b in bookings_api.my_bookings(current_user=student, db=db_session)] == [booking.id]
    assert [b.id for b in bookings_api.trainer_bookings(current_user=trainer, db=db_session)] == [booking.id]

    with pytest.raises(HTTPException) as exc:
        bookings_api.get_booking(booking.id, current_user=make_user("student"), db=db_session)
    assert exc.value.status_code == 403

    with pytest.raises(HTTPException) as exc:
        bookings_api.get_booking(999, current_user=student, db=db_session)
    assert exc.value.status_code == 404


def test_fake_payment_disabled_is_403(student, monkeypatch):
    monkeypatch.setattr(settings, "MOCK_PAYMENTS_ENABLED", False)
    with pytest.raises(HTTPException) as exc:
        payments_api.fake_payment(FakePaymentRequest(amount=25), current_user=student)
    assert exc.value.status_code == 403


def test_payment_intent_without_stripe_key_is_502(student, monkeypatch):
    monkeypatch.setattr(settings, "STRIPE_SECRET_KEY", "")
    with pytest.raises(HTTPException) as exc:
        payments_api.create_payment_intent(payments_api.PaymentIntentCreate(amount=25), current_user=student)
    assert exc.value.status_code == 502


def test_trainer_listing(db_session, make_user):
    make_user("trainer", name="Cheap", hourly_rate=10)
    make_user("trainer", name="Pricey", hourly_rate=60)

    listed = users_api.list_trainers(sort_by="price_high", db=db_session)
    assert [t["name"] for t in listed] == ["Pricey", "Cheap"]
    assert listed[0]["hourly_rate"] == 60.0

    with pytest.raises(HTTPException) as exc:
        users_api.list_trainers(sort_by="alphabetical", db=db_session)
    assert exc.value.status_code == 400


def test_profile_update_normalizes_availability(db_session, trainer):
    updated = users_api.update_profile(
        UserProfileUpdate(bio="Native speaker", availability=[{"day": "monday", "available": True}]),
        current_user=trainer,
        db=db_session,
    )
    assert updated.profile.bio == "Native speaker"
    assert len(updated.profile.availability) == 7
    assert updated.profile.availability[0] == {
        "day": "monday", "start_time": None, "end_time": None, "available": True,
    }

    with pytest.raises(HTTPException) as exc:
        users_api.get_profile(999, db=db_session)
    assert exc.value.status_code == 404


def test_require_role_rejects_wrong_role(student, trainer):
    checker = require_role("trainer")
    assert checker(current_user=trainer) is trainer
    with pytest.raises(HTTPException) as exc:
        checker(current_user=student)
    assert exc.value.status_code == 403


def test_profile_schema_defaults_match_model():
    profile = UserProfile()
    assert profile.hourly_rate == settings.DEFAULT_HOURLY_RATE
    assert profile.average_rating == 5.0
