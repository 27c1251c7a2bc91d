"""Payment provider boundary.

Creates charge requests with the configured provider and turns provider
webhook events into (booking id, reference, succeeded) outcomes. The
booking core only ever sees those outcomes.
"""

import json
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Optional

import stripe

from shuttle.core.config import PaymentProviderKind, Settings
from shuttle.schemas.base import BaseSchema
from shuttle.schemas.booking import BookingRead

logger = logging.getLogger(__name__)

WEBHOOK_TOLERANCE_SECONDS = 300


class PaymentProviderError(RuntimeError):
    """The payment provider rejected or failed a request."""


class WebhookSignatureError(ValueError):
    """A webhook payload did not carry a valid signature."""


class PaymentIntent(BaseSchema):
    provider_ref: str
    client_secret: Optional[str] = None


class PaymentOutcome(BaseSchema):
    booking_id: int
    provider_ref: str
    succeeded: bool


class PaymentProvider(ABC):
    """Abstract interface for payment providers."""

    @abstractmethod
    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        booking: BookingRead,
    ) -> PaymentIntent:
        """Request a charge of amount minor units for a booking."""
        pass


class StripePaymentProvider(PaymentProvider):
    """Stripe PaymentIntents through the stripe library."""

    def __init__(self, secret_key: str):
        self.secret_key = secret_key

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        booking: BookingRead,
    ) -> PaymentIntent:
        try:
            intent = await stripe.PaymentIntent.create_async(
                api_key=self.secret_key,
                amount=amount,
                currency=currency,
                metadata={
                    "booking_id": str(booking.id),
                    "customer_name": booking.customer_name,
                    "customer_email": booking.customer_email,
                },
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as e:
            logger.error(f"[PAYMENT] Stripe request failed for booking {booking.id}: {e}")
            raise PaymentProviderError(str(e)) from e

        return PaymentIntent(provider_ref=intent.id, client_secret=intent.client_secret)


class FakePaymentProvider(PaymentProvider):
    """Local provider for development and tests. Never charges anything."""

    def __init__(self):
        self.intents: list[PaymentIntent] = []

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        booking: BookingRead,
    ) -> PaymentIntent:
        ref = f"pi_fake_{uuid.uuid4().hex[:24]}"
        intent = PaymentIntent(provider_ref=ref, client_secret=f"{ref}_secret")
        self.intents.append(intent)
        logger.info(f"[PAYMENT] Fake intent {ref} for booking {booking.id}: {amount} {currency}")
        return intent


def get_payment_provider(settings: Settings) -> PaymentProvider:
    """Factory function to get the payment provider based on config."""
    if settings.payment_provider == PaymentProviderKind.STRIPE:
        return StripePaymentProvider(secret_key=settings.stripe_secret_key)
    return FakePaymentProvider()


def construct_event(
    payload: bytes,
    header: Optional[str],
    secret: Optional[str],
    tolerance: int = WEBHOOK_TOLERANCE_SECONDS,
) -> dict[str, Any]:
    """Parse a webhook payload into an event.

    With a secret configured the Stripe-Signature header is checked first
    and WebhookSignatureError raised when it does not match. A payload that
    is not a JSON object raises ValueError.
    """
    if secret:
        if not header:
            raise WebhookSignatureError("Missing signature header")
        try:
            event = stripe.Webhook.construct_event(payload, header, secret, tolerance)
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError(str(e)) from e
    else:
        event = json.loads(payload)

    if not isinstance(event, dict):
        raise ValueError("Event payload must be an object")
    return event


def parse_payment_event(event: dict[str, Any]) -> Optional[PaymentOutcome]:
    """Map a provider event to a payment outcome. Unrelated events give None."""
    event_type = event.get("type")
    if event_type == "payment_intent.succeeded":
        succeeded = True
    elif event_type == "payment_intent.payment_failed":
        succeeded = False
    else:
        return None

    intent = (event.get("data") or {}).get("object") or {}
    booking_id = (intent.get("metadata") or {}).get("booking_id")
    if not booking_id or not intent.get("id"):
        logger.warning(f"[PAYMENT] {event_type} event without booking metadata")
        return None

    try:
        return PaymentOutcome(booking_id=int(booking_id), provider_ref=intent["id"], succeeded=succeeded)
    except ValueError:
        logger.warning(f"[PAYMENT] {event_type} event with invalid booking id {booking_id!r}")
        return None
