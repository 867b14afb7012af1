from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from app.crud import user as user_crud
from app.database import get_db
from app import models
from app.schemas import TrainerSummary, UserDisplay, UserProfileUpdate, UserStats
from app.services import trainer_search
from app.services.errors import ServiceError, http_error
from app.utils.security import get_current_user

router = APIRouter(prefix="/users", tags=["Users"])


def trainer_summary(trainer: models.User) -> dict:
    profile = trainer.profile
    stats = trainer.stats
    return {
        "id": trainer.id,
        "name": trainer.name,
        "bio": profile.bio if profile else "",
        "image_url": profile.image_url if profile else "",
        "location": profile.location if profile else "",
        "languages": list(profile.languages or []) if profile else [],
        "trainer_languages": list(profile.trainer_languages or []) if profile else [],
        "specializations": list(profile.specializations or []) if profile else [],
        "experience": trainer_search.experience(trainer),
        "hourly_rate": float(trainer_search.hourly_rate(trainer)),
        "rating": trainer_search.trainer_rating(trainer),
        "total_bookings": stats.total_bookings if stats else 0,
        "teaching_style": profile.teaching_style if profile else None,
        "is_available": bool(profile.is_available) if profile else False,
    }


# ======================
# GET: Trainer discovery
# ======================
@router.get("/trainers", response_model=List[TrainerSummary])
def list_trainers(
    language: Optional[str] = None,
    min_rate: Annotated[Optional[float], Query(alias="minRate", ge=0)] = None,
    max_rate: Annotated[Optional[float], Query(alias="maxRate", ge=0)] = None,
    experience: Annotated[Optional[int], Query(ge=0)] = None,
    specialization: Optional[str] = None,
    rating: Annotated[Optional[float], Query(ge=0, le=5)] = None,
    search: Optional[str] = None,
    available: Optional[bool] = None,
    sort_by: Annotated[str, Query(alias="sortBy")] = "rating",
    db: Session = Depends(get_db),
):
    criteria = trainer_search.TrainerSearchCriteria(
        language=language,
        min_rate=min_rate,
        max_rate=max_rate,
        min_experience=experience,
        specialization=specialization,
        min_rating=rating,
        query=search,
        available=available,
        sort_by=sort_by,
    )
    try:
        trainers = trainer_search.search(db, criteria)
    except ServiceError as e:
        raise http_error(e)
    return [trainer_summary(trainer) for trainer in trainers]


# ======================
# GET: Public profile
# ======================
@router.get("/profile/{user_id}", response_model=UserDisplay)
def get_profile(user_id: int, db: Session = Depends(get_db)):
    user = db.query(models.User).filter(
        models.User.id == user_id,
        models.User.is_active.is_(True),
    ).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# ======================
# PUT: Update own profile
# ======================
@router.put("/profile", response_model=UserDisplay)
def update_profile(
    profile_update: UserProfileUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    update_data = profile_update.model_dump(exclude_unset=True)
    user_crud.update_user_profile(db, current_user.id, update_data)
    db.refresh(current_user)
    return current_user


# ======================
# GET: Dashboard stats
# ======================
@router.get("/stats", response_model=UserStats)
def get_stats(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    stats = user_crud.get_user_stats(db, current_user.id)
    db.commit()
    return stats
