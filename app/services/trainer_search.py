# app/services/trainer_search.py
"""
Trainer discovery: filter and sort active trainers by query criteria.

Filters are evaluated in memory over the active trainer set on every call.
Language and specialization data live in JSON lists, so substring matching
is done here rather than in SQL.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app import models
from app.services.errors import ValidationError

SORT_OPTIONS = ("rating", "price_low", "price_high", "experience")


@dataclass
class TrainerSearchCriteria:
    language: Optional[str] = None
    min_rate: Optional[float] = None
    max_rate: Optional[float] = None
    min_experience: Optional[int] = None
    specialization: Optional[str] = None
    min_rating: Optional[float] = None
    query: Optional[str] = None
    available: Optional[bool] = None
    sort_by: str = "rating"


def _lower(value) -> str:
    return str(value or "").strip().lower()


def _lowered_list(values) -> List[str]:
    return [_lower(v) for v in (values or []) if v is not None]


def hourly_rate(trainer: models.User) -> Decimal:
    profile = trainer.profile
    if profile is None or profile.hourly_rate is None:
        return Decimal("0")
    return Decimal(profile.hourly_rate)


def experience(trainer: models.User) -> int:
    return int(trainer.profile.experience or 0) if trainer.profile else 0


def trainer_rating(trainer: models.User) -> float:
    """Stats rating first, then the profile average, then 0."""
    if trainer.stats is not None and trainer.stats.rating is not None:
        return float(trainer.stats.rating)
    if trainer.profile is not None and trainer.profile.average_rating is not None:
        return float(trainer.profile.average_rating)
    return 0.0


def trainer_languages(trainer: models.User) -> List[str]:
    profile = trainer.profile
    if profile is None:
        return []
    rich = [entry.get("language") for entry in (profile.trainer_languages or []) if isinstance(entry, dict)]
    return _lowered_list(profile.languages) + _lowered_list(rich)


def _contains(needle: str, haystack: List[str]) -> bool:
    return any(needle in item for item in haystack)


def matches(trainer: models.User, criteria: TrainerSearchCriteria) -> bool:
    profile = trainer.profile

    if criteria.language:
        if not _contains(_lower(criteria.language), trainer_languages(trainer)):
            return False

    rate = hourly_rate(trainer)
    if criteria.min_rate is not None and rate < Decimal(str(criteria.min_rate)):
        return False
    if criteria.max_rate is not None and rate > Decimal(str(criteria.max_rate)):
        return False

    if criteria.min_experience is not None and experience(trainer) < criteria.min_experience:
        return False

    if criteria.specialization:
        specializations = _lowered_list(profile.specializations if profile else [])
        if not _contains(_lower(criteria.specialization), specializations):
            return False

    if criteria.min_rating is not None and trainer_rating(trainer) < criteria.min_rating:
        return False

    if criteria.available and not (profile is not None and profile.is_available):
        return False

    if criteria.query:
        q = _lower(criteria.query)
        fields = [_lower(trainer.name), _lower(profile.bio if profile else "")]
        fields += trainer_languages(trainer)
        fields += _lowered_list(profile.specializations if profile else [])
        if not _contains(q, fields):
            return False

    return True


def _sort_key(sort_by: str):
    if sort_by == "price_low":
        return lambda t: (hourly_rate(t), t.id)
    if sort_by == "price_high":
        return lambda t: (-hourly_rate(t), t.id)
    if sort_by == "experience":
        return lambda t: (-experience(t), t.id)
    return lambda t: (-trainer_rating(t), t.id)


def search(db: Session, criteria: TrainerSearchCriteria) -> List[models.User]:
    sort_by = _lower(criteria.sort_by) or "rating"
    if sort_by not in SORT_OPTIONS:
        raise ValidationError(f"Invalid sortBy. Use one of: {', '.join(SORT_OPTIONS)}")
    if (
        criteria.min_rate is not None
        and criteria.max_rate is not None
        and criteria.min_rate > criteria.max_rate
    ):
        raise ValidationError("minRate cannot be greater than maxRate")

    trainers = (
        db.query(models.User)
        .options(selectinload(models.User.profile), selectinload(models.User.stats))
        .filter(models.User.role == "trainer", models.User.is_active.is_(True))
        .all()
    )

    results = [trainer for trainer in trainers if matches(trainer, criteria)]
    return sorted(results, key=_sort_key(sort_by))
