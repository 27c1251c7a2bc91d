"""Customer booking submission and payment start."""

from fastapi import APIRouter, Depends, HTTPException, status

from shuttle.schemas.booking import BookingCreate, BookingRead, BookingRejection, PaymentIntentResponse
from shuttle.services.booking_service import BookingService, get_booking_service
from shuttle.services.lifecycle import AdmissionResult, InvalidTransitionError, RejectionReason
from shuttle.services.payments import PaymentProviderError

router = APIRouter(prefix="/bookings", tags=["bookings"])

REJECTION_RESPONSES = {
    RejectionReason.TRIP_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Trip not found"),
    RejectionReason.PROPERTY_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Property not found"),
    RejectionReason.INSUFFICIENT_SEATS: (status.HTTP_409_CONFLICT, "Not enough seats available"),
}


def rejection_error(result: AdmissionResult) -> HTTPException:
    status_code, detail = REJECTION_RESPONSES[result.reason]
    rejection = BookingRejection(
        reason=result.reason.value,
        detail=detail,
        seats_available=result.seats_available,
    )
    return HTTPException(status_code=status_code, detail=rejection.model_dump())


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    service: BookingService = Depends(get_booking_service),
):
    """Reserve seats on a trip.

    The booking starts reserved with payment pending. Rejections carry a
    reason; an insufficient-seats rejection also reports the seats left.
    """
    result = await service.submit_booking(data)
    if not result.admitted:
        raise rejection_error(result)
    return result.booking


@router.get("/{booking_id}", response_model=BookingRead)
async def get_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    booking = await service.get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


@router.post("/{booking_id}/payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
):
    """Start payment for a reserved booking."""
    try:
        intent = await service.start_payment(booking_id)
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except PaymentProviderError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Payment provider unavailable",
        )

    if not intent:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return intent
