"""
Payment Authorization Adapter

Narrow wrapper around the payment processor. The booking engine only needs
one call: authorize an amount and get back a handle whose client secret the
guest uses to complete payment out-of-band. No funds move here and nothing
is written to the ledger.

Stripe is the production processor (PaymentIntent API). Every processor
failure, including a network timeout, surfaces as AuthorizationFailed.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from functools import lru_cache
from typing import Any, Optional

import stripe

from ..config import settings
from ..exceptions import AuthorizationFailed, InvalidAmount
from ..utils.logging_config import get_logger
from ..utils.metrics import record_authorization

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthorizationHandle:
    """Opaque processor handle for one booking attempt (not persisted beyond its id)"""
    id: str
    client_secret: str
    amount: int
    currency: str


def to_minor_units(amount: Any) -> int:
    """
    Convert a decimal amount to the processor's integer minor units (cents).

    Raises InvalidAmount when the amount is missing, not a number, or rounds
    to zero or less.
    """
    if amount is None:
        raise InvalidAmount("Amount is required")
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f"Amount {amount!r} is not a number")
    if not value.is_finite():
        raise InvalidAmount(f"Amount {amount!r} is not a number")

    minor_units = int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if minor_units <= 0:
        raise InvalidAmount("Amount must be greater than zero")
    return minor_units


class PaymentAdapter(ABC):
    """Contract the booking workflow needs from a payment processor"""

    @abstractmethod
    def authorize(self, amount_minor_units: int) -> AuthorizationHandle:
        """Create a pending authorization for the amount"""


class StripePaymentAdapter(PaymentAdapter):
    """
    Stripe-backed adapter. Each authorization creates a card PaymentIntent.

    Args:
        api_key: Stripe secret key; without one every call fails
        currency: ISO currency code, lower case
        timeout_seconds: bound on the HTTP round-trip to Stripe
        client: pre-built stripe.StripeClient (tests inject a mock)
    """

    def __init__(
        self,
        api_key: str = "",
        currency: str = "usd",
        timeout_seconds: int = 20,
        client: Optional[Any] = None
    ):
        self.currency = currency
        self.client = client
        if self.client is None and api_key:
            self.client = stripe.StripeClient(
                api_key,
                http_client=stripe.RequestsClient(timeout=timeout_seconds),
                max_network_retries=0,
            )

    def authorize(self, amount_minor_units: int) -> AuthorizationHandle:
        if amount_minor_units is None or amount_minor_units <= 0:
            raise InvalidAmount("Amount must be greater than zero")

        if self.client is None:
            logger.error("Payment authorization requested but STRIPE_SECRET_KEY is not set")
            raise AuthorizationFailed("Payment processor is not configured")

        start = time.perf_counter()
        try:
            intent = self.client.payment_intents.create(params={
                "amount": amount_minor_units,
                "currency": self.currency,
                "payment_method_types": ["card"],
            })
        except stripe.StripeError as e:
            record_authorization(False, time.perf_counter() - start)
            logger.warning(f"Stripe authorization of {amount_minor_units} {self.currency} failed: {e}")
            reason = getattr(e, "user_message", None) or "processor error"
            raise AuthorizationFailed(f"Payment authorization failed: {reason}") from e

        duration = time.perf_counter() - start
        record_authorization(True, duration)
        logger.log_with_context(
            logging.INFO,
            f"Authorized {amount_minor_units} {self.currency}",
            entity_type="payment_intent",
            entity_id=intent.id,
            duration_ms=round(duration * 1000, 2),
        )

        return AuthorizationHandle(
            id=intent.id,
            client_secret=intent.client_secret,
            amount=amount_minor_units,
            currency=self.currency,
        )


@lru_cache()
def get_payment_adapter() -> PaymentAdapter:
    """FastAPI dependency: process-wide Stripe adapter built from settings"""
    return StripePaymentAdapter(
        api_key=settings.stripe_secret_key,
        currency=settings.payment_currency,
        timeout_seconds=settings.payment_timeout_seconds,
    )
