# app/services/review_service.py
"""
Review Service Layer
Business rules for submitting reviews and summarising trainer ratings
"""

import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional, Dict, Any, List

from app.crud import review as review_crud
from app.models.booking import Booking
from app.models.review import Review
from app.models.session import Session as SessionModel
from app.models.user import User
from app.services.errors import (
    DuplicateReview,
    ForbiddenError,
    NotFoundError,
    SessionNotCompleted,
    ValidationError,
)

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 500


# ======================
# REVIEW SUBMISSION
# ======================

def _resolve_booking(db: Session, student: User, session: SessionModel, booking_id: Optional[int]) -> Booking:
    if booking_id is None:
        booking = db.query(Booking).filter(
            Booking.session_id == session.id,
            Booking.student_id == student.id,
        ).order_by(Booking.id.asc()).first()
        if booking is None:
            raise ForbiddenError("You did not attend this session")
        return booking

    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if booking is None:
        raise NotFoundError("Booking not found")
    if booking.student_id != student.id:
        raise ForbiddenError("Booking belongs to another student")
    if booking.session_id != session.id:
        raise ValidationError("Booking is not part of this session")
    return booking


def create_review(
    db: Session,
    student: User,
    session_id: int,
    rating: int,
    comment: Optional[str] = None,
    trainer_id: Optional[int] = None,
    booking_id: Optional[int] = None,
) -> Review:
    """
    Submit a review for a completed session.

    Requirements:
    - Rating is an integer from 1 to 5, comment at most 500 characters
    - The student attended the session through a paid booking
    - The session is completed
    - One review per student per session

    Raises:
        ValidationError, NotFoundError, ForbiddenError,
        SessionNotCompleted, DuplicateReview
    """
    if isinstance(rating, bool) or not isinstance(rating, int) or not (1 <= rating <= 5):
        raise ValidationError("Rating must be between 1 and 5")

    if comment is not None:
        comment = comment.strip() or None
    if comment and len(comment) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Comment must be {MAX_COMMENT_LENGTH} characters or less")

    session = db.query(SessionModel).filter(SessionModel.id == session_id).first()
    if session is None:
        raise NotFoundError("Session not found")

    booking = _resolve_booking(db, student, session, booking_id)

    if trainer_id is not None and trainer_id != session.trainer_id:
        raise ValidationError("Trainer does not match the session's trainer")

    if session.status != "completed":
        raise SessionNotCompleted("Only completed sessions can be reviewed")

    if booking.payment_status != "completed":
        raise ValidationError("Only paid bookings can be reviewed")

    if review_crud.get_student_review_for_session(db, student.id, session.id):
        raise DuplicateReview("You have already reviewed this session")

    try:
        review = review_crud.create_review(
            db=db,
            student_id=student.id,
            trainer_id=session.trainer_id,
            session_id=session.id,
            booking_id=booking.id,
            rating=rating,
            student_name=booking.student_name or student.name,
            comment=comment,
        )
        review_crud.update_trainer_rating(db, session.trainer_id)
        db.commit()
    except IntegrityError:
        # Unique (student, session) constraint lost a race with another request.
        db.rollback()
        raise DuplicateReview("You have already reviewed this session")

    db.refresh(review)
    logger.info("Review %s created: student=%s session=%s rating=%s",
                review.id, student.id, session.id, rating)
    return review


# ======================
# READ
# ======================

def list_for_trainer(db: Session, trainer_id: int) -> List[Review]:
    return review_crud.get_reviews_by_trainer(db, trainer_id)


def list_for_session(db: Session, session_id: int) -> List[Review]:
    return review_crud.get_reviews_by_session(db, session_id)


def summarize(reviews: List[Review]) -> Dict[str, Any]:
    """
    Average rating and 1-5 histogram computed over an already fetched list.
    """
    distribution = {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    for review in reviews:
        distribution[review.rating] = distribution.get(review.rating, 0) + 1

    total = len(reviews)
    average = round(sum(r.rating for r in reviews) / total, 2) if total else 0.0

    return {
        "average_rating": average,
        "total_reviews": total,
        "rating_distribution": distribution,
    }
