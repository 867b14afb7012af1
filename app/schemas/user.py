from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from app.config import settings

CURRENT_YEAR = datetime.now().year


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase input; responses use camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ======================
# USER SCHEMAS
# ======================

class User(CamelModel):
    id: int
    name: str
    email: EmailStr
    role: str
    is_active: bool
    created_at: Optional[datetime] = None


# ======================
# PROFILE PIECES
# ======================

class TrainerLanguage(CamelModel):
    language: str = Field(..., min_length=1)
    proficiency: Literal["Native", "Fluent"] = "Fluent"
    teaching_level: List[str] = Field(default_factory=list)


class Certification(CamelModel):
    name: str = Field(..., min_length=1)
    issuer: str = ""
    year: Optional[int] = None

    @field_validator("year")
    @classmethod
    def validate_year(cls, v):
        if v is not None and not (1950 <= v <= CURRENT_YEAR):
            raise ValueError(f"Certification year must be between 1950 and {CURRENT_YEAR}")
        return v


class AvailabilitySlot(CamelModel):
    day: Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    available: bool = False


# ======================
# PROFILE SCHEMAS
# ======================

class UserProfile(CamelModel):
    bio: Optional[str] = ""
    image_url: Optional[str] = ""
    phone: Optional[str] = ""
    location: Optional[str] = ""
    highest_qualification: Optional[str] = ""
    college_name: Optional[str] = ""
    languages: List[str] = Field(default_factory=list)
    trainer_languages: List[TrainerLanguage] = Field(default_factory=list)
    experience: int = 0
    hourly_rate: float = settings.DEFAULT_HOURLY_RATE
    specializations: List[str] = Field(default_factory=list)
    certifications: List[Certification] = Field(default_factory=list)
    availability: List[AvailabilitySlot] = Field(default_factory=list)
    teaching_style: Optional[str] = "Conversational"
    student_age: List[str] = Field(default_factory=list)
    is_available: bool = True
    average_rating: float = 5.0


class UserProfileUpdate(CamelModel):
    """Self-service profile update. Email, role and password are not part of it."""
    bio: Optional[str] = Field(None, max_length=2000)
    image_url: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    highest_qualification: Optional[str] = None
    college_name: Optional[str] = None
    languages: Optional[List[str]] = None
    trainer_languages: Optional[List[TrainerLanguage]] = None
    experience: Optional[int] = Field(None, ge=0)
    hourly_rate: Optional[float] = Field(None, ge=0)
    specializations: Optional[List[str]] = None
    certifications: Optional[List[Certification]] = None
    availability: Optional[List[AvailabilitySlot]] = None
    teaching_style: Optional[str] = None
    student_age: Optional[List[str]] = None
    is_available: Optional[bool] = None

    @field_validator("languages", "specializations", "student_age")
    @classmethod
    def strip_items(cls, v):
        if v is None:
            return v
        return [item.strip() for item in v if item and item.strip()]


class UserStats(CamelModel):
    total_sessions: int = 0
    completed_sessions: int = 0
    total_bookings: int = 0
    total_earnings: float = 0
    rating: float = 5.0


class UserDisplay(User):
    profile: Optional[UserProfile] = None
    stats: Optional[UserStats] = None


# ======================
# TRAINER DISCOVERY
# ======================

class TrainerSummary(CamelModel):
    id: int
    name: str
    bio: Optional[str] = ""
    image_url: Optional[str] = ""
    location: Optional[str] = ""
    languages: List[str] = Field(default_factory=list)
    trainer_languages: List[Dict] = Field(default_factory=list)
    specializations: List[str] = Field(default_factory=list)
    experience: int = 0
    hourly_rate: float = 0
    rating: float = 0
    total_bookings: int = 0
    teaching_style: Optional[str] = None
    is_available: bool = True
