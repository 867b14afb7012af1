# app/models/review.py
from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP, func, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    trainer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    session_id = Column(Integer, ForeignKey("sessions.id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(String(500))
    student_name = Column(String(100), nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    # Constraints
    __table_args__ = (
        CheckConstraint('rating >= 1 AND rating <= 5', name='check_rating_range'),
        UniqueConstraint('student_id', 'session_id', name='uq_review_student_session'),
    )

    # Relationships
    session = relationship("Session", back_populates="reviews")
    booking = relationship("Booking", back_populates="review")
    student = relationship("User", foreign_keys=[student_id], back_populates="reviews_given")
    trainer = relationship("User", foreign_keys=[trainer_id], back_populates="reviews_received")
