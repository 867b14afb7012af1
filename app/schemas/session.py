from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from app.schemas.user import CamelModel

# ======================
# SESSION REQUEST MODELS
# ======================

class SessionCreate(CamelModel):
    booking_ids: List[int] = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    duration: Optional[int] = Field(None, gt=0)  # minutes
    language: Optional[str] = None
    level: Literal["beginner", "intermediate", "advanced"] = "beginner"
    scheduled_date: Optional[datetime] = None
    max_students: Optional[int] = Field(None, gt=0)


# ======================
# SESSION UPDATE MODELS
# ======================

class SessionStatusUpdate(CamelModel):
    status: str  # "active", "completed", "cancelled"


# ======================
# SESSION RESPONSE MODELS
# ======================

class SessionParticipant(CamelModel):
    id: int
    name: str


class SessionResponse(CamelModel):
    id: int
    trainer_id: int
    trainer: Optional[SessionParticipant] = None
    title: str
    description: Optional[str] = None
    meeting_link: str
    meeting_room_id: str
    status: str
    duration: int
    max_students: int
    scheduled_date: datetime
    language: Optional[str] = None
    level: str
    students: List[SessionParticipant] = Field(default_factory=list)
    bookings: List[int] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
