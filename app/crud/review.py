# app/crud/review.py
"""
Review CRUD Operations
Database access for reviews and trainer rating aggregates
"""

from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Optional, List

from app.models.review import Review
from app.crud import user as user_crud


# ======================
# REVIEW CRUD
# ======================

def create_review(
    db: Session,
    student_id: int,
    trainer_id: int,
    session_id: int,
    booking_id: int,
    rating: int,
    student_name: str,
    comment: Optional[str] = None
) -> Review:
    """
    Insert a review row. Caller commits.

    Raises:
        ValueError: If rating is out of range
        IntegrityError: On flush, if the student already reviewed the session
    """
    if not (1 <= rating <= 5):
        raise ValueError("Rating must be between 1 and 5")

    review = Review(
        student_id=student_id,
        trainer_id=trainer_id,
        session_id=session_id,
        booking_id=booking_id,
        rating=rating,
        comment=comment,
        student_name=student_name,
    )

    db.add(review)
    db.flush()
    return review


def get_review_by_id(db: Session, review_id: int) -> Optional[Review]:
    return db.query(Review).filter(Review.id == review_id).first()


def get_student_review_for_session(db: Session, student_id: int, session_id: int) -> Optional[Review]:
    """
    Get the review a student left for a session.

    Returns:
        Review object or None if the student has not reviewed it
    """
    return db.query(Review).filter(
        Review.student_id == student_id,
        Review.session_id == session_id,
    ).first()


def get_reviews_by_trainer(db: Session, trainer_id: int) -> List[Review]:
    """
    Get all reviews for a trainer, newest first.
    """
    return (
        db.query(Review)
        .filter(Review.trainer_id == trainer_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )


def get_reviews_by_session(db: Session, session_id: int) -> List[Review]:
    return (
        db.query(Review)
        .filter(Review.session_id == session_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )


# ======================
# TRAINER RATING
# ======================

def calculate_trainer_rating(db: Session, trainer_id: int) -> tuple[float, int]:
    """
    Calculate average rating and total reviews for a trainer.

    Returns:
        Tuple of (average_rating, total_reviews)
    """
    result = db.query(
        func.avg(Review.rating).label('avg_rating'),
        func.count(Review.id).label('total')
    ).filter(
        Review.trainer_id == trainer_id
    ).first()

    avg_rating = float(result.avg_rating) if result.avg_rating else 0.0
    total = int(result.total) if result.total else 0

    return (avg_rating, total)


def update_trainer_rating(db: Session, trainer_id: int) -> float:
    """
    Recalculate the trainer's rating from all of their reviews and store it
    on both the stats row and the profile. Caller commits.
    """
    avg_rating, total = calculate_trainer_rating(db, trainer_id)
    if total == 0:
        return user_crud.get_user_stats(db, trainer_id).rating

    rounded = round(avg_rating, 2)
    user_crud.get_user_stats(db, trainer_id).rating = rounded
    user_crud.get_user_profile(db, trainer_id).average_rating = rounded

    db.flush()
    return rounded
