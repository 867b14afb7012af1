from sqlalchemy import (
    JSON,
    TIMESTAMP,
    Boolean,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import relationship
from app.database import Base
from datetime import datetime

USER_ROLES = ("student", "trainer")


# ---------------- USER (AUTH TABLE) ----------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    __table_args__ = (
        CheckConstraint("role IN ('student', 'trainer')", name="check_user_role"),
    )

    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    stats = relationship("UserStats", back_populates="user", uselist=False, cascade="all, delete-orphan")
    student_bookings = relationship("Booking", foreign_keys="Booking.student_id", back_populates="student")
    trainer_bookings = relationship("Booking", foreign_keys="Booking.trainer_id", back_populates="trainer")
    trainer_sessions = relationship("Session", back_populates="trainer")
    reviews_given = relationship("Review", foreign_keys="Review.student_id", back_populates="student")
    reviews_received = relationship("Review", foreign_keys="Review.trainer_id", back_populates="trainer")

    @property
    def is_trainer(self) -> bool:
        return self.role == "trainer"

    @property
    def is_student(self) -> bool:
        return self.role == "student"


# ---------------- PROFILE TABLE ----------------
class UserProfile(Base):
    __tablename__ = "user_profiles"

    id: int = Column(Integer, primary_key=True)
    user_id: int = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    bio: str = Column(String(2000), default="")
    image_url: str = Column(String(500), default="")
    phone: str = Column(String(30), default="")
    location: str = Column(String(150), default="")
    highest_qualification: str = Column(String(150), default="")  # ← students
    college_name: str = Column(String(150), default="")            # ← students

    # Plain language names for simple filtering, plus richer trainer entries:
    # [{"language", "proficiency", "teaching_level": [...]}]
    languages = Column(JSON, default=list)
    trainer_languages = Column(JSON, default=list)

    experience: int = Column(Integer, default=0, nullable=False)
    hourly_rate = Column(Numeric(10, 2), default=25, nullable=False)
    specializations = Column(JSON, default=list)
    certifications = Column(JSON, default=list)   # [{"name", "issuer", "year"}]
    availability = Column(JSON, default=list)     # seven {"day", "start_time", "end_time", "available"}
    teaching_style: str = Column(String(100), default="Conversational")
    student_age = Column(JSON, default=list)
    is_available: bool = Column(Boolean, default=True, nullable=False)
    average_rating: float = Column(Float, default=5.0, nullable=False)

    created_at: datetime = Column(TIMESTAMP, server_default=func.now())
    updated_at: datetime = Column(
        TIMESTAMP,
        server_default=func.now(),
        onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("experience >= 0", name="check_profile_experience"),
        CheckConstraint("hourly_rate >= 0", name="check_profile_hourly_rate"),
    )

    user = relationship("User", back_populates="profile")


# ---------------- AGGREGATE STATS ----------------
class UserStats(Base):
    __tablename__ = "user_stats"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )
    total_sessions = Column(Integer, default=0, nullable=False)
    completed_sessions = Column(Integer, default=0, nullable=False)
    total_bookings = Column(Integer, default=0, nullable=False)
    total_earnings = Column(Numeric(12, 2), default=0, nullable=False)
    rating = Column(Float, default=5.0, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(
        TIMESTAMP,
        server_default=func.now(),
        onupdate=func.now()
    )

    user = relationship("User", back_populates="stats")
