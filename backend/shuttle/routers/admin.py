"""Admin routes: trip management, manifests and booking overrides."""

from fastapi import APIRouter, Depends, HTTPException, status

from shuttle.core.security import require_admin
from shuttle.schemas.booking import BookingRead, ManifestRow, PaymentOutcomeRequest
from shuttle.schemas.dashboard import DashboardStats
from shuttle.schemas.property import PropertyCreate, PropertyRead, PropertyTripCreate, PropertyTripRead
from shuttle.schemas.trip import AdminTripCreate, TripRead, TripUpdate, TripWithAvailability
from shuttle.services.booking_service import BookingService, get_booking_service
from shuttle.services.lifecycle import InvalidTransitionError

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# Trips

@router.get("/trips", response_model=list[TripWithAvailability])
async def list_trips(service: BookingService = Depends(get_booking_service)):
    return await service.list_trips()


@router.post("/trips", response_model=TripRead, status_code=status.HTTP_201_CREATED)
async def create_trip(
    data: AdminTripCreate,
    service: BookingService = Depends(get_booking_service),
):
    """Create a trip, optionally offering it at properties right away."""
    return await service.create_trip(data.trip_fields(), data.property_ids)


@router.put("/trips/{trip_id}", response_model=TripRead)
async def update_trip(
    trip_id: int,
    data: TripUpdate,
    service: BookingService = Depends(get_booking_service),
):
    trip = await service.update_trip(trip_id, data)
    if not trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return trip


@router.get("/trips/{trip_id}/bookings", response_model=list[BookingRead])
async def list_trip_bookings(trip_id: int, service: BookingService = Depends(get_booking_service)):
    bookings = await service.list_trip_bookings(trip_id)
    if bookings is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return bookings


@router.get("/trips/{trip_id}/manifest", response_model=list[ManifestRow])
async def get_trip_manifest(trip_id: int, service: BookingService = Depends(get_booking_service)):
    """Passenger list for a trip; empty for unknown trips."""
    return await service.get_manifest(trip_id)


@router.post(
    "/trips/{trip_id}/properties",
    response_model=PropertyTripRead,
    status_code=status.HTTP_201_CREATED,
)
async def assign_trip_to_property(
    trip_id: int,
    data: PropertyTripCreate,
    service: BookingService = Depends(get_booking_service),
):
    link = await service.assign_trip_to_property(trip_id, data.property_id)
    if not link:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip or property not found")
    return link


# Properties

@router.post("/properties", response_model=PropertyRead, status_code=status.HTTP_201_CREATED)
async def create_property(
    data: PropertyCreate,
    service: BookingService = Depends(get_booking_service),
):
    prop = await service.create_property(data)
    if not prop:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Property slug '{data.slug}' already exists",
        )
    return prop


# Bookings

@router.post("/bookings/{booking_id}/cancel", response_model=BookingRead)
async def cancel_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    try:
        booking = await service.cancel_booking(booking_id)
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


@router.post("/bookings/{booking_id}/payment-outcome", response_model=BookingRead)
async def record_payment_outcome(
    booking_id: int,
    data: PaymentOutcomeRequest,
    service: BookingService = Depends(get_booking_service),
):
    """Record a payment outcome by hand, e.g. for payments taken offline."""
    try:
        booking = await service.notify_payment_outcome(booking_id, data.provider_ref, data.succeeded)
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(service: BookingService = Depends(get_booking_service)):
    return await service.dashboard()
