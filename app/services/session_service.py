# app/services/session_service.py
"""
Session scheduler.

A trainer groups paid, unattached bookings into one scheduled video session.
Status moves forward only:

    scheduled -> active -> completed
    scheduled | active -> cancelled

Every transition is an explicit call by the owning trainer.
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.crud import user as user_crud
from app.models.booking import Booking
from app.models.session import SESSION_LEVELS, SESSION_STATUSES, Session as SessionModel
from app.models.user import User
from app.services.errors import (
    ForbiddenError,
    InvalidStateTransition,
    NotFoundError,
    ServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    "scheduled": ("active", "cancelled"),
    "active": ("completed", "cancelled"),
    "completed": (),
    "cancelled": (),
}

# Status an attached booking takes when its session enters a status.
BOOKING_STATUS_FOR_SESSION = {
    "scheduled": "confirmed",
    "active": "confirmed",
    "completed": "completed",
    "cancelled": "cancelled",
}


# ======================
# HELPER FUNCTIONS
# ======================

def generate_meeting_room(session_id: int) -> tuple:
    """Return (room_id, link) for the external video room of a session."""
    room_id = f"{settings.MEETING_ROOM_PREFIX}-{session_id}-{secrets.token_hex(4)}"
    link = f"{settings.MEETING_BASE_URL.rstrip('/')}/{room_id}"
    return room_id, link


def _unique_ids(booking_ids: Iterable[int]) -> List[int]:
    ids = []
    for booking_id in booking_ids or []:
        if booking_id not in ids:
            ids.append(booking_id)
    return ids


def _bump_stats(db: Session, user_ids: Iterable[int], field: str) -> None:
    for user_id in user_ids:
        stats = user_crud.get_user_stats(db, user_id)
        setattr(stats, field, (getattr(stats, field) or 0) + 1)


# ======================
# CREATE
# ======================

def create_session(
    db: Session,
    trainer: User,
    booking_ids: Iterable[int],
    title: str,
    description: Optional[str] = None,
    duration: Optional[int] = None,
    language: Optional[str] = None,
    level: str = "beginner",
    scheduled_date: Optional[datetime] = None,
    max_students: Optional[int] = None,
) -> SessionModel:
    if not trainer.is_trainer:
        raise ForbiddenError("Only trainers can create sessions")

    ids = _unique_ids(booking_ids)
    if not ids:
        raise ValidationError("Select at least one booking")

    title = (title or "").strip()
    if not title:
        raise ValidationError("Title is required")

    duration = settings.SESSION_DEFAULT_DURATION if duration is None else duration
    if duration <= 0:
        raise ValidationError("Duration must be greater than 0 minutes")

    level = (level or "beginner").strip().lower()
    if level not in SESSION_LEVELS:
        raise ValidationError(f"Level must be one of: {', '.join(SESSION_LEVELS)}")

    max_students = settings.SESSION_DEFAULT_MAX_STUDENTS if max_students is None else max_students
    if max_students <= 0:
        raise ValidationError("maxStudents must be greater than 0")

    bookings = db.query(Booking).filter(Booking.id.in_(ids)).all()
    found = {booking.id for booking in bookings}
    missing = [booking_id for booking_id in ids if booking_id not in found]
    if missing:
        raise NotFoundError(f"Booking(s) not found: {', '.join(str(m) for m in missing)}")

    student_ids = []
    for booking in bookings:
        if booking.trainer_id != trainer.id:
            raise ForbiddenError(f"Booking {booking.id} belongs to another trainer")
        if booking.payment_status != "completed":
            raise ValidationError(f"Booking {booking.id} has not been paid")
        if booking.session_id is not None:
            raise ValidationError(f"Booking {booking.id} is already part of a session")
        if booking.student_id not in student_ids:
            student_ids.append(booking.student_id)

    if len(student_ids) > max_students:
        raise ValidationError(
            f"Session allows at most {max_students} students, got {len(student_ids)}"
        )

    try:
        session = SessionModel(
            trainer_id=trainer.id,
            title=title,
            description=description,
            # Replaced once the row has an id.
            meeting_room_id=f"{settings.MEETING_ROOM_PREFIX}-pending-{secrets.token_hex(8)}",
            meeting_link="",
            status="scheduled",
            duration=duration,
            max_students=max_students,
            scheduled_date=scheduled_date or datetime.now(timezone.utc),
            language=language,
            level=level,
        )
        db.add(session)
        db.flush()
        session.meeting_room_id, session.meeting_link = generate_meeting_room(session.id)

        # Attach only bookings that are still unattached, paid and owned by
        # this trainer; anything else means a concurrent change won the race.
        attached = (
            db.query(Booking)
            .filter(
                Booking.id.in_(ids),
                Booking.session_id.is_(None),
                Booking.trainer_id == trainer.id,
                Booking.payment_status == "completed",
            )
            .update(
                {Booking.session_id: session.id, Booking.status: BOOKING_STATUS_FOR_SESSION["scheduled"]},
                synchronize_session=False,
            )
        )
        if attached != len(ids):
            raise InvalidStateTransition("One or more bookings changed while the session was being created")

        _bump_stats(db, [trainer.id] + student_ids, "total_sessions")
        db.commit()
    except (ServiceError, SQLAlchemyError):
        db.rollback()
        raise

    db.refresh(session)
    logger.info("Session %s created by trainer %s with bookings %s", session.id, trainer.id, ids)
    return session


# ======================
# STATUS
# ======================

def set_status(db: Session, session_id: int, trainer: User, new_status: str) -> SessionModel:
    new_status = (new_status or "").strip().lower()
    if new_status not in SESSION_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(SESSION_STATUSES)}")

    session = db.query(SessionModel).filter(SessionModel.id == session_id).first()
    if session is None:
        raise NotFoundError("Session not found")
    if session.trainer_id != trainer.id:
        raise ForbiddenError("Only the session's trainer can change its status")

    current = session.status
    if new_status not in ALLOWED_TRANSITIONS.get(current, ()):
        logger.warning("Rejected session %s transition %s -> %s", session.id, current, new_status)
        raise InvalidStateTransition(f"Cannot change session status from '{current}' to '{new_status}'")

    try:
        session.status = new_status
        for booking in session.bookings:
            booking.status = BOOKING_STATUS_FOR_SESSION[new_status]
        if new_status == "completed":
            _bump_stats(db, [session.trainer_id] + session.student_ids, "completed_sessions")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(session)
    logger.info("Session %s moved %s -> %s", session.id, current, new_status)
    return session


# ======================
# READ
# ======================

def list_for_user(db: Session, user: User) -> List[SessionModel]:
    query = db.query(SessionModel)
    if user.is_trainer:
        query = query.filter(SessionModel.trainer_id == user.id)
    else:
        student_session_ids = select(Booking.session_id).where(
            Booking.student_id == user.id,
            Booking.session_id.isnot(None),
        )
        query = query.filter(SessionModel.id.in_(student_session_ids))
    return query.order_by(SessionModel.scheduled_date.asc(), SessionModel.id.asc()).all()


def get_session_for_user(db: Session, session_id: int, user: User) -> SessionModel:
    session = db.query(SessionModel).filter(SessionModel.id == session_id).first()
    if session is None:
        raise NotFoundError("Session not found")
    if user.id != session.trainer_id and user.id not in session.student_ids:
        raise ForbiddenError("You are not part of this session")
    return session
