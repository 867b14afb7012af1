# app/models/session.py
from sqlalchemy import Column, Integer, String, Text, ForeignKey, TIMESTAMP, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from app.database import Base

SESSION_STATUSES = ("scheduled", "active", "completed", "cancelled")
SESSION_LEVELS = ("beginner", "intermediate", "advanced")


class Session(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    trainer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    meeting_link = Column(String(500), nullable=False)
    meeting_room_id = Column(String(200), unique=True, nullable=False)
    status = Column(String(20), default="scheduled", nullable=False)
    duration = Column(Integer, default=60, nullable=False)  # minutes
    max_students = Column(Integer, default=10, nullable=False)
    scheduled_date = Column(DateTime(timezone=True), nullable=False)
    language = Column(String(100))
    level = Column(String(20), default="beginner", nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    __table_args__ = (
        CheckConstraint("duration > 0", name="check_session_duration_positive"),
        CheckConstraint("max_students > 0", name="check_session_max_students"),
        CheckConstraint(
            "status IN ('scheduled', 'active', 'completed', 'cancelled')",
            name="check_session_status",
        ),
        CheckConstraint(
            "level IN ('beginner', 'intermediate', 'advanced')",
            name="check_session_level",
        ),
    )

    # Relationships
    trainer = relationship("User", back_populates="trainer_sessions")
    bookings = relationship("Booking", back_populates="session", order_by="Booking.id")
    reviews = relationship("Review", back_populates="session")

    @property
    def student_ids(self):
        """Distinct students, in booking order, derived from attached bookings."""
        seen = []
        for booking in self.bookings:
            if booking.student_id not in seen:
                seen.append(booking.student_id)
        return seen

    @property
    def booking_ids(self):
        return [booking.id for booking in self.bookings]
