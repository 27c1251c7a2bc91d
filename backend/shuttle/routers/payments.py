"""Payment provider webhook."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from shuttle.core.config import Settings, get_settings
from shuttle.services.booking_service import BookingService, get_booking_service
from shuttle.services.lifecycle import InvalidTransitionError
from shuttle.services.payments import construct_event, parse_payment_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/webhook")
async def payment_webhook(
    request: Request,
    service: BookingService = Depends(get_booking_service),
    settings: Settings = Depends(get_settings),
):
    """Receive payment outcomes from the provider.

    Redelivered events are harmless: outcomes are applied idempotently.
    """
    payload = await request.body()

    try:
        event = construct_event(
            payload,
            request.headers.get("stripe-signature"),
            settings.stripe_webhook_secret,
        )
    except ValueError as e:
        logger.warning(f"[PAYMENT] Rejected webhook: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    outcome = parse_payment_event(event)
    if outcome is None:
        return {"received": True}

    try:
        booking = await service.notify_payment_outcome(
            outcome.booking_id, outcome.provider_ref, outcome.succeeded
        )
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")

    return {"received": True, "booking_id": booking.id, "booking_status": booking.booking_status}
