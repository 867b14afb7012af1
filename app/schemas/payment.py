from typing import Optional

from pydantic import Field

from app.schemas.user import CamelModel


class PaymentIntentCreate(CamelModel):
    amount: float = Field(..., gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    trainer_id: Optional[int] = None


class PaymentIntentResponse(CamelModel):
    client_secret: str
    intent_id: str


class FakePaymentRequest(CamelModel):
    amount: float = Field(..., gt=0)


class FakePaymentResponse(CamelModel):
    payment_id: str
    status: str = "succeeded"
