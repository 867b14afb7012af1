# app/services/payment_gateway.py
"""
Payment adapter.

Wraps the Stripe card processor and a no-network mock used for demos and
tests. Card details never reach this server: the browser confirms the
PaymentIntent directly with Stripe using the client secret returned by
``create_intent``. The server only creates intents and, before a booking is
marked paid, retrieves the intent again to check what Stripe says happened.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Union

import stripe

from app.config import settings
from app.services.errors import ForbiddenError, PaymentProviderError, ValidationError

logger = logging.getLogger(__name__)

MOCK_PAYMENT_PREFIX = "mock_"
MOCK_PAYMENT_ID_RE = re.compile(r"^mock_[0-9a-f]{32}$")
CENTS = Decimal("0.01")

Number = Union[int, float, Decimal, str]


@dataclass
class PaymentIntentResult:
    client_secret: str
    intent_id: str


@dataclass
class PaymentVerification:
    """What the processor reports for a payment it handled."""
    status: str
    provider_transaction_id: str
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    receipt_url: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"

    @property
    def failed(self) -> bool:
        return self.status in ("canceled", "failed")


def to_decimal(amount: Number) -> Decimal:
    try:
        value = Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP)
    except ArithmeticError:
        raise ValidationError("Amount must be a number")
    if not value.is_finite() or value <= 0:
        raise ValidationError("Amount must be greater than 0")
    return value


def to_minor_units(amount: Number) -> int:
    return int(to_decimal(amount) * 100)


# ======================
# STRIPE
# ======================

class StripeGateway:
    name = "card"

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.STRIPE_SECRET_KEY

    def _require_stripe(self) -> None:
        if not self.api_key:
            raise PaymentProviderError("Stripe secret key not configured (STRIPE_SECRET_KEY)")
        stripe.api_key = self.api_key

    def create_intent(
        self,
        amount: Number,
        currency: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PaymentIntentResult:
        amount_cents = to_minor_units(amount)
        currency = (currency or settings.PAYMENT_CURRENCY).lower()
        self._require_stripe()

        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_cents,
                currency=currency,
                automatic_payment_methods={"enabled": True},
                metadata={key: str(value) for key, value in (metadata or {}).items()},
            )
        except stripe.StripeError as exc:
            logger.error("Stripe error creating payment intent: %s", exc)
            raise PaymentProviderError(f"Failed to create payment intent: {exc}")

        logger.info("Created payment intent %s for %s %s", intent.id, amount_cents, currency)
        return PaymentIntentResult(client_secret=intent.client_secret, intent_id=intent.id)

    def retrieve(self, payment_id: str) -> PaymentVerification:
        self._require_stripe()
        try:
            intent = stripe.PaymentIntent.retrieve(payment_id, expand=["latest_charge"])
        except stripe.StripeError as exc:
            logger.error("Stripe error retrieving payment intent %s: %s", payment_id, exc)
            raise PaymentProviderError(f"Failed to verify payment: {exc}")

        charge = getattr(intent, "latest_charge", None)
        receipt_url = getattr(charge, "receipt_url", None) if charge is not None else None
        amount = getattr(intent, "amount_received", None) or intent.amount
        return PaymentVerification(
            status=intent.status,
            provider_transaction_id=intent.id,
            amount=(Decimal(amount) / 100).quantize(CENTS),
            currency=(intent.currency or "").lower(),
            receipt_url=receipt_url if isinstance(receipt_url, str) else None,
        )


# ======================
# MOCK
# ======================

class MockGateway:
    name = "mock"

    def pay(self, amount: Number) -> Dict[str, str]:
        """Always succeeds; only the amount is validated."""
        to_decimal(amount)
        return {"status": "succeeded", "payment_id": f"{MOCK_PAYMENT_PREFIX}{uuid.uuid4().hex}"}

    def retrieve(self, payment_id: str) -> PaymentVerification:
        """Ids are not tracked: any id in the ``mock_<32 hex>`` format counts as settled."""
        if not MOCK_PAYMENT_ID_RE.match(payment_id or ""):
            return PaymentVerification(status="failed", provider_transaction_id=payment_id or "")
        return PaymentVerification(status="succeeded", provider_transaction_id=payment_id)


def mock_payments_enabled() -> bool:
    return bool(settings.MOCK_PAYMENTS_ENABLED)


def get_gateway(payment_method: str):
    if payment_method == "card":
        return StripeGateway()
    if payment_method == "mock":
        if not mock_payments_enabled():
            raise ForbiddenError("Mock payments are disabled")
        return MockGateway()
    raise ValidationError("Payment method must be one of: card, mock")
