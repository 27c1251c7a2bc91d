"""Public property pages and the trips offered at them."""

from fastapi import APIRouter, Depends, HTTPException, status

from shuttle.schemas.property import PropertyRead
from shuttle.schemas.trip import TripWithAvailability
from shuttle.services.booking_service import BookingService, get_booking_service

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=list[PropertyRead])
async def list_properties(service: BookingService = Depends(get_booking_service)):
    """List all properties."""
    return await service.list_properties()


@router.get("/{slug}", response_model=PropertyRead)
async def get_property(slug: str, service: BookingService = Depends(get_booking_service)):
    """Get a property by its slug."""
    prop = await service.get_property_by_slug(slug)
    if not prop:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    return prop


@router.get("/{slug}/trips", response_model=list[TripWithAvailability])
async def list_property_trips(slug: str, service: BookingService = Depends(get_booking_service)):
    """Upcoming trips bookable from a property, with remaining seats."""
    trips = await service.list_available_trips_by_slug(slug)
    if trips is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    return trips
