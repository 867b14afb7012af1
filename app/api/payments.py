# app/api/payments.py
"""
Payment endpoints.

- POST /payments/create-payment-intent - Stripe PaymentIntent for the card path
- POST /payments/fake-payment - no-network mock payment (when enabled)
- GET /payments/config - publishable key for the browser SDK
"""

from fastapi import APIRouter, Depends, status

from app import models
from app.config import settings
from app.schemas import (
    FakePaymentRequest,
    FakePaymentResponse,
    PaymentIntentCreate,
    PaymentIntentResponse,
)
from app.services.errors import ServiceError, http_error
from app.services.payment_gateway import StripeGateway, get_gateway
from app.utils.security import require_student

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("/config")
def payment_config():
    return {
        "publishableKey": settings.STRIPE_PUBLISHABLE_KEY,
        "currency": settings.PAYMENT_CURRENCY,
        "mockPaymentsEnabled": settings.MOCK_PAYMENTS_ENABLED,
    }


@router.post("/create-payment-intent", response_model=PaymentIntentResponse, status_code=status.HTTP_201_CREATED)
def create_payment_intent(
    payload: PaymentIntentCreate,
    current_user: models.User = Depends(require_student),
):
    metadata = {"student_id": current_user.id}
    if payload.trainer_id is not None:
        metadata["trainer_id"] = payload.trainer_id
    try:
        result = StripeGateway().create_intent(payload.amount, payload.currency, metadata=metadata)
    except ServiceError as e:
        raise http_error(e)
    return {"client_secret": result.client_secret, "intent_id": result.intent_id}


@router.post("/fake-payment", response_model=FakePaymentResponse)
def fake_payment(
    payload: FakePaymentRequest,
    current_user: models.User = Depends(require_student),
):
    try:
        result = get_gateway("mock").pay(payload.amount)
    except ServiceError as e:
        raise http_error(e)
    return result
