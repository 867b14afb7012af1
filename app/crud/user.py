from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session
from app import models
from app.config import settings
from app.utils.security import get_password_hash

ALL_DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def create_user(db: Session, *, name: str, email: str, password: str, role: str) -> models.User:
    db_user = models.User(
        name=name,
        email=email.strip().lower(),
        password_hash=get_password_hash(password),
        role=role,
        is_active=True,
    )
    db.add(db_user)
    db.flush()

    db.add(models.UserProfile(
        user_id=db_user.id,
        hourly_rate=settings.DEFAULT_HOURLY_RATE,
        availability=full_availability([]),
    ))
    db.add(models.UserStats(user_id=db_user.id))
    return db_user


def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()


def get_user(db: Session, user_id: int):
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_active_trainer(db: Session, trainer_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(
        models.User.id == trainer_id,
        models.User.role == "trainer",
        models.User.is_active.is_(True),
    ).first()


def get_user_profile(db: Session, user_id: int):
    profile = db.query(models.UserProfile).filter(models.UserProfile.user_id == user_id).first()
    if profile is None:
        profile = models.UserProfile(
            user_id=user_id,
            hourly_rate=settings.DEFAULT_HOURLY_RATE,
            availability=full_availability([]),
        )
        db.add(profile)
        db.flush()
    return profile


def update_user_profile(db: Session, user_id: int, update_data: dict):
    db_profile = get_user_profile(db, user_id)
    if "availability" in update_data:
        update_data["availability"] = full_availability(update_data["availability"] or [])
    for key, value in update_data.items():
        setattr(db_profile, key, value)
    db.commit()
    db.refresh(db_profile)
    return db_profile


def get_user_stats(db: Session, user_id: int) -> models.UserStats:
    stats = db.query(models.UserStats).filter(models.UserStats.user_id == user_id).first()
    if stats is None:
        stats = models.UserStats(
            user_id=user_id,
            total_sessions=0,
            completed_sessions=0,
            total_bookings=0,
            total_earnings=Decimal("0"),
            rating=5.0,
        )
        db.add(stats)
        db.flush()
    return stats


def full_availability(entries):
    """Return one availability entry per weekday, filling missing days as unavailable."""
    by_day = {}
    for entry in entries:
        day = str(entry.get("day", "")).strip().lower()
        if day in ALL_DAYS:
            by_day[day] = {
                "day": day,
                "start_time": entry.get("start_time"),
                "end_time": entry.get("end_time"),
                "available": bool(entry.get("available", False)),
            }
    return [
        by_day.get(day, {"day": day, "start_time": None, "end_time": None, "available": False})
        for day in ALL_DAYS
    ]
