"""Public trip lookup."""

from fastapi import APIRouter, Depends, HTTPException, status

from shuttle.schemas.trip import TripWithAvailability
from shuttle.services.booking_service import BookingService, get_booking_service

router = APIRouter(prefix="/trips", tags=["trips"])


@router.get("/{trip_id}", response_model=TripWithAvailability)
async def get_trip(trip_id: int, service: BookingService = Depends(get_booking_service)):
    trip = await service.get_trip(trip_id)
    if not trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return trip
