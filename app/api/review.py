# app/api/review.py
"""
Review & Rating API Router

Endpoints:
- POST /reviews - Submit a review for a completed session
- GET /reviews/trainer/{trainer_id} - Public reviews of a trainer
- GET /reviews/trainer/{trainer_id}/summary - Average rating and histogram
- GET /reviews/trainer-reviews - Reviews received by the calling trainer
- GET /reviews/session/{session_id} - Reviews of a session (participants only)
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.models.user import User
from app.schemas import ReviewCreate, ReviewResponse, TrainerRatingSummary
from app.services import review_service, session_service
from app.services.errors import ServiceError, http_error
from app.utils.security import get_current_user, require_student, require_trainer

router = APIRouter(prefix="/reviews", tags=["reviews"])


# ======================
# SUBMIT REVIEW
# ======================
@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def submit_review(
    review: ReviewCreate,
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db)
):
    """
    Submit a review for a completed session.

    Requirements:
    - Session must be completed
    - Caller must hold a paid booking in the session
    - Only one review per student per session
    - Rating must be 1-5, comment max 500 characters
    """
    try:
        return review_service.create_review(
            db,
            student=current_user,
            session_id=review.session_id,
            rating=review.rating,
            comment=review.comment,
            trainer_id=review.trainer_id,
            booking_id=review.booking_id,
        )
    except ServiceError as e:
        raise http_error(e)


# ======================
# TRAINER REVIEWS
# ======================
@router.get("/trainer-reviews", response_model=List[ReviewResponse])
def get_my_trainer_reviews(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db)
):
    return review_service.list_for_trainer(db, current_user.id)


@router.get("/trainer/{trainer_id}", response_model=List[ReviewResponse])
def get_trainer_reviews(trainer_id: int, db: Session = Depends(get_db)):
    return review_service.list_for_trainer(db, trainer_id)


@router.get("/trainer/{trainer_id}/summary", response_model=TrainerRatingSummary)
def get_trainer_rating_summary(trainer_id: int, db: Session = Depends(get_db)):
    summary = review_service.summarize(review_service.list_for_trainer(db, trainer_id))
    return {"trainer_id": trainer_id, **summary}


# ======================
# SESSION REVIEWS
# ======================
@router.get("/session/{session_id}", response_model=List[ReviewResponse])
def get_session_reviews(
    session_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        session_service.get_session_for_user(db, session_id, current_user)
    except ServiceError as e:
        raise http_error(e)
    return review_service.list_for_session(db, session_id)
