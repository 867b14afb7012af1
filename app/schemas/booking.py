from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import Field, field_validator

from app.schemas.user import CamelModel

# ======================
# BOOKING REQUEST MODELS
# ======================

class BookingCreate(CamelModel):
    trainer_id: int
    student_name: Optional[str] = Field(None, max_length=100)
    # "stripe" / "fake" are accepted as aliases of "card" / "mock".
    payment_method: str
    # Defaults to the trainer's hourly rate when omitted.
    amount: Optional[float] = Field(None, gt=0)
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("payment_method")
    @classmethod
    def normalize_method(cls, v):
        return v.strip().lower()


class PaymentStatusUpdate(CamelModel):
    payment_status: Literal["completed", "failed"]
    payment_id: Optional[str] = Field(None, max_length=255)


# ======================
# BOOKING RESPONSE MODELS
# ======================

class BookingResponse(CamelModel):
    id: int
    student_id: int
    trainer_id: int
    student_name: str
    status: str
    payment_status: str
    payment_method: str
    amount: float
    currency: str
    payment_id: Optional[str] = None
    payment_details: Optional[Dict[str, Any]] = None
    session_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
