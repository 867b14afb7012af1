# app/models/booking.py
from sqlalchemy import (
    JSON,
    TIMESTAMP,
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship
from app.database import Base

BOOKING_STATUSES = ("pending", "confirmed", "completed", "cancelled")
PAYMENT_STATUSES = ("pending", "completed", "failed")
PAYMENT_METHODS = ("card", "mock")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    trainer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    student_name = Column(String(100), nullable=False)
    status = Column(String(20), default="pending", nullable=False)
    payment_status = Column(String(20), default="pending", nullable=False)
    payment_method = Column(String(20), nullable=False)
    # Snapshot of the trainer's hourly rate when the booking was made.
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), default="usd", nullable=False)
    # Unique so one settled payment can back at most one booking.
    payment_id = Column(String(255), unique=True, nullable=True)
    payment_details = Column(JSON)
    session_id = Column(Integer, ForeignKey("sessions.id"), nullable=True, index=True)
    notes = Column(Text)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    __table_args__ = (
        CheckConstraint("amount > 0", name="check_booking_amount_positive"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="check_booking_status",
        ),
        CheckConstraint(
            "payment_status IN ('pending', 'completed', 'failed')",
            name="check_booking_payment_status",
        ),
        CheckConstraint("payment_method IN ('card', 'mock')", name="check_booking_payment_method"),
    )

    # Relationships
    student = relationship("User", foreign_keys=[student_id], back_populates="student_bookings")
    trainer = relationship("User", foreign_keys=[trainer_id], back_populates="trainer_bookings")
    session = relationship("Session", back_populates="bookings")
    review = relationship("Review", back_populates="booking", uselist=False)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "completed"
