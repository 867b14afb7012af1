# app/services/booking_service.py
"""
Booking ledger: one paid (or paying) engagement between a student and a trainer.

A booking's payment status moves once, from ``pending`` to ``completed`` or
``failed``. ``completed`` is only recorded after the payment processor
confirms settlement for the same amount and currency; the client's report is
used to find the payment, never as proof of it.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.crud import user as user_crud
from app.models.booking import Booking
from app.models.user import User, UserStats
from app.services.errors import (
    ForbiddenError,
    InvalidStateTransition,
    NotFoundError,
    ValidationError,
)
from app.services.payment_gateway import PaymentVerification, get_gateway, to_decimal

logger = logging.getLogger(__name__)

PAYMENT_METHOD_ALIASES = {
    "card": "card",
    "stripe": "card",
    "mock": "mock",
    "fake": "mock",
}


def normalize_payment_method(value: str) -> str:
    method = PAYMENT_METHOD_ALIASES.get(str(value or "").strip().lower())
    if method is None:
        raise ValidationError("Payment method must be one of: card, mock")
    return method


# ======================
# CREATE
# ======================

def create_booking(
    db: Session,
    student: User,
    trainer_id: int,
    student_name: str,
    payment_method: str,
    amount=None,
    notes: Optional[str] = None,
) -> Booking:
    if not student.is_student:
        raise ForbiddenError("Only students can book trainers")

    method = normalize_payment_method(payment_method)
    student_name = (student_name or "").strip() or student.name

    trainer = user_crud.get_active_trainer(db, trainer_id)
    if trainer is None:
        raise NotFoundError("Trainer not found")

    rate = user_crud.get_user_profile(db, trainer.id).hourly_rate
    trainer_rate = to_decimal(rate if rate is not None else settings.DEFAULT_HOURLY_RATE)
    if amount is None:
        booking_amount = trainer_rate
    else:
        booking_amount = to_decimal(amount)
        if booking_amount != trainer_rate:
            raise ValidationError(
                f"Amount {booking_amount} does not match the trainer's hourly rate {trainer_rate}"
            )

    booking = Booking(
        student_id=student.id,
        trainer_id=trainer.id,
        student_name=student_name,
        status="pending",
        payment_status="pending",
        payment_method=method,
        amount=booking_amount,
        currency=settings.PAYMENT_CURRENCY.lower(),
        notes=notes,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)

    logger.info("Booking %s created: student=%s trainer=%s amount=%s method=%s",
                booking.id, student.id, trainer.id, booking_amount, method)
    return booking


# ======================
# PAYMENT STATUS
# ======================

def _payment_details(
    booking: Booking,
    verification: Optional[PaymentVerification],
    status: str,
    reference: Optional[str] = None,
) -> dict:
    details = {
        "amount": str(verification.amount if verification and verification.amount is not None else booking.amount),
        "currency": (verification.currency if verification and verification.currency else booking.currency),
        "payment_method": booking.payment_method,
        "status": status,
        "receipt_url": verification.receipt_url if verification else None,
        "processed_at": datetime.now(timezone.utc).isoformat(),
    }
    if reference:
        details["payment_reference"] = reference
    return details


def _freeze(
    db: Session,
    booking: Booking,
    payment_status: str,
    payment_id: Optional[str],
    details: dict,
) -> Booking:
    """
    Move a pending booking to its final payment status.

    The UPDATE only matches a booking that is still ``pending``, so of two
    racing requests exactly one changes the row; the other gets
    InvalidStateTransition. Trainer stats are bumped only by the winner.
    ``payment_id`` is only stored for payments the gateway confirmed.
    """
    booking_id = booking.id
    trainer_id = booking.trainer_id
    amount = Decimal(booking.amount)

    try:
        changed = (
            db.query(Booking)
            .filter(Booking.id == booking_id, Booking.payment_status == "pending")
            .update(
                {
                    Booking.payment_status: payment_status,
                    Booking.payment_id: payment_id,
                    Booking.payment_details: details,
                },
                synchronize_session=False,
            )
        )
        if changed != 1:
            raise InvalidStateTransition("Payment status has already been set and cannot change")

        if payment_status == "completed":
            user_crud.get_user_stats(db, trainer_id)
            db.query(UserStats).filter(UserStats.user_id == trainer_id).update(
                {
                    UserStats.total_bookings: UserStats.total_bookings + 1,
                    UserStats.total_earnings: UserStats.total_earnings + amount,
                },
                synchronize_session=False,
            )
        db.commit()
    except InvalidStateTransition:
        db.rollback()
        logger.warning("Booking %s payment already settled; %s update discarded", booking_id, payment_status)
        raise
    except IntegrityError:
        db.rollback()
        raise ValidationError("Payment has already been applied to another booking")

    db.refresh(booking)
    return booking


def mark_payment_status(
    db: Session,
    booking_id: int,
    actor: User,
    payment_status: str,
    payment_id: Optional[str] = None,
) -> Booking:
    if payment_status not in ("completed", "failed"):
        raise ValidationError("Payment status must be 'completed' or 'failed'")

    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if booking is None:
        raise NotFoundError("Booking not found")
    if booking.student_id != actor.id:
        raise ForbiddenError("Only the booking's student can update its payment")
    if booking.payment_status != "pending":
        logger.warning("Rejected payment transition %s -> %s for booking %s",
                       booking.payment_status, payment_status, booking.id)
        raise InvalidStateTransition(
            f"Payment status is already '{booking.payment_status}' and cannot change"
        )

    payment_id = (payment_id or "").strip() or None

    if payment_status == "failed":
        # Client-reported id is unverified: kept as a reference, never in payment_id.
        logger.info("Booking %s payment reported failed by client", booking.id)
        return _freeze(db, booking, "failed", None, _payment_details(booking, None, "failed", payment_id))

    if not payment_id:
        raise ValidationError("paymentId is required to confirm a payment")

    taken = db.query(Booking.id).filter(
        Booking.payment_id == payment_id,
        Booking.id != booking.id,
    ).first()
    if taken:
        raise ValidationError("Payment has already been applied to another booking")

    verification = get_gateway(booking.payment_method).retrieve(payment_id)

    if verification.failed:
        logger.info("Booking %s payment %s reported %s by provider", booking.id, payment_id, verification.status)
        return _freeze(
            db, booking, "failed", None, _payment_details(booking, verification, verification.status, payment_id),
        )

    if not verification.succeeded:
        raise ValidationError(f"Payment has not settled (status: {verification.status})")

    if verification.amount is not None and verification.amount != Decimal(booking.amount):
        raise ValidationError("Paid amount does not match the booking amount")
    if verification.currency and verification.currency != booking.currency:
        raise ValidationError("Paid currency does not match the booking currency")

    booking = _freeze(
        db,
        booking,
        "completed",
        verification.provider_transaction_id,
        _payment_details(booking, verification, "succeeded"),
    )
    logger.info("Booking %s marked paid with %s", booking.id, booking.payment_id)
    return booking


# ======================
# READ
# ======================

def list_for_student(db: Session, student_id: int) -> List[Booking]:
    return (
        db.query(Booking)
        .filter(Booking.student_id == student_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )


def list_for_trainer(db: Session, trainer_id: int) -> List[Booking]:
    return (
        db.query(Booking)
        .filter(Booking.trainer_id == trainer_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )


def get_booking_for_user(db: Session, booking_id: int, user: User) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if booking is None:
        raise NotFoundError("Booking not found")
    if user.id not in (booking.student_id, booking.trainer_id):
        raise ForbiddenError("You are not part of this booking")
    return booking
