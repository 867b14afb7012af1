# app/schemas/review.py
"""
Review & Rating Pydantic Schemas
Request/response models with validation
"""

from pydantic import Field, field_validator
from typing import Dict, Optional
from datetime import datetime

from app.schemas.user import CamelModel


# ======================
# REVIEW SCHEMAS
# ======================

class ReviewCreate(CamelModel):
    """Schema for creating a review"""
    session_id: int = Field(..., description="Session identifier")
    trainer_id: Optional[int] = Field(None, description="Trainer of the session")
    booking_id: Optional[int] = Field(None, description="Reviewer's booking in the session")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5 stars")
    comment: Optional[str] = Field(None, max_length=500, description="Review comment (max 500 chars)")

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, v):
        """Blank comments are stored as no comment"""
        if v is None:
            return None
        return v.strip() or None


class ReviewResponse(CamelModel):
    """Review response for API"""
    id: int
    student_id: int
    trainer_id: int
    session_id: int
    booking_id: int
    rating: int
    comment: Optional[str] = None
    student_name: str
    created_at: Optional[datetime] = None


# ======================
# TRAINER RATING SCHEMAS
# ======================

class TrainerRatingSummary(CamelModel):
    """Trainer rating summary response"""
    trainer_id: int
    average_rating: float = Field(..., description="Average rating (0-5)")
    total_reviews: int
    rating_distribution: Dict[int, int] = Field(..., description="Count of each rating (1-5)")
