"""Booking service: the operations the HTTP layer exposes.

Wires the registry, ledger, availability calculator, lifecycle controller
and manifest projector over one store, and adds the payment provider
boundary for starting payments.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from fastapi import Request

from shuttle.models.enums import BookingStatus, PaymentStatus
from shuttle.schemas.booking import BookingCreate, BookingRead, ManifestRow, PaymentIntentResponse
from shuttle.schemas.dashboard import DashboardStats
from shuttle.schemas.property import PropertyCreate, PropertyRead, PropertyTripRead
from shuttle.schemas.trip import TripCreate, TripRead, TripUpdate, TripWithAvailability
from shuttle.services.availability import AvailabilityCalculator
from shuttle.services.booking_ledger import BookingLedger
from shuttle.services.jobs import JobsService
from shuttle.services.lifecycle import AdmissionResult, BookingLifecycleController, InvalidTransitionError
from shuttle.services.manifest import ManifestProjector
from shuttle.services.payments import FakePaymentProvider, PaymentProvider
from shuttle.services.properties import PropertyDirectory
from shuttle.services.store import Store
from shuttle.services.trip_registry import TripRegistry

logger = logging.getLogger(__name__)

DASHBOARD_UPCOMING_LIMIT = 5


class BookingService:
    """Facade over the booking core for routers and scripts."""

    def __init__(
        self,
        store: Store,
        payment_provider: Optional[PaymentProvider] = None,
        currency: str = "usd",
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.store = store
        self.payment_provider = payment_provider or FakePaymentProvider()
        self.currency = currency
        self.clock = clock

        self.properties = PropertyDirectory(store)
        self.registry = TripRegistry(store)
        self.ledger = BookingLedger(store)
        self.jobs = JobsService(store)
        self.availability = AvailabilityCalculator(self.registry, self.ledger)
        self.lifecycle = BookingLifecycleController(
            registry=self.registry,
            properties=self.properties,
            ledger=self.ledger,
            availability=self.availability,
            jobs=self.jobs,
        )
        self.manifest = ManifestProjector(self.registry, self.ledger, self.properties)

    async def close(self) -> None:
        await self.store.close()

    async def with_availability(self, trip: TripRead, as_of: Optional[datetime] = None) -> TripWithAvailability:
        as_of = as_of or self.clock()
        return TripWithAvailability(
            **trip.model_dump(),
            seats_available=await self.availability.seats_available_for(trip),
            booking_open=self.registry.is_booking_open(trip, as_of),
        )

    # Properties

    async def list_properties(self) -> list[PropertyRead]:
        return await self.properties.list_all()

    async def get_property_by_slug(self, slug: str) -> Optional[PropertyRead]:
        return await self.properties.get_by_slug(slug)

    async def create_property(self, data: PropertyCreate) -> Optional[PropertyRead]:
        """Create a property. None when the slug is already taken."""
        if await self.properties.get_by_slug(data.slug):
            return None
        return await self.properties.create(data)

    # Trips

    async def list_available_trips(
        self,
        property_id: int,
        as_of: Optional[datetime] = None,
    ) -> Optional[list[TripWithAvailability]]:
        """Upcoming active trips offered at a property. None when the property is missing."""
        if not await self.properties.get(property_id):
            return None
        as_of = as_of or self.clock()
        trips = await self.registry.list_for_property(property_id, as_of)
        return [await self.with_availability(trip, as_of) for trip in trips]

    async def list_available_trips_by_slug(
        self,
        slug: str,
        as_of: Optional[datetime] = None,
    ) -> Optional[list[TripWithAvailability]]:
        prop = await self.properties.get_by_slug(slug)
        if not prop:
            return None
        return await self.list_available_trips(prop.id, as_of)

    async def get_trip(self, trip_id: int) -> Optional[TripWithAvailability]:
        trip = await self.registry.get(trip_id)
        if not trip:
            return None
        return await self.with_availability(trip)

    async def list_trips(self) -> list[TripWithAvailability]:
        as_of = self.clock()
        return [await self.with_availability(trip, as_of) for trip in await self.registry.list_all()]

    async def create_trip(self, data: TripCreate, property_ids: Optional[list[int]] = None) -> TripRead:
        trip = await self.registry.create(data)
        for property_id in property_ids or []:
            if await self.properties.get(property_id):
                await self.registry.assign_to_property(trip.id, property_id)
            else:
                logger.warning(f"[TRIP] Skipping unknown property {property_id} for trip {trip.id}")
        return trip

    async def update_trip(self, trip_id: int, data: TripUpdate) -> Optional[TripRead]:
        return await self.registry.update(trip_id, data)

    async def assign_trip_to_property(self, trip_id: int, property_id: int) -> Optional[PropertyTripRead]:
        """None when either side of the association is missing."""
        if not await self.registry.get(trip_id) or not await self.properties.get(property_id):
            return None
        return await self.registry.assign_to_property(trip_id, property_id)

    async def list_trip_bookings(self, trip_id: int) -> Optional[list[BookingRead]]:
        if not await self.registry.get(trip_id):
            return None
        return await self.ledger.list_by_trip(trip_id)

    # Bookings

    async def submit_booking(self, data: BookingCreate) -> AdmissionResult:
        return await self.lifecycle.admit_booking(data)

    async def get_booking(self, booking_id: int) -> Optional[BookingRead]:
        return await self.ledger.get(booking_id)

    async def start_payment(self, booking_id: int) -> Optional[PaymentIntentResponse]:
        """Create a provider charge for the booking's total and store its reference.

        None when the booking is missing. Raises InvalidTransitionError
        when the booking is no longer awaiting payment.
        """
        booking = await self.ledger.get(booking_id)
        if not booking:
            return None
        if booking.booking_status != BookingStatus.RESERVED:
            raise InvalidTransitionError(booking.id, booking.booking_status, BookingStatus.CONFIRMED)
        if booking.payment_status != PaymentStatus.PENDING:
            raise InvalidTransitionError(booking.id, booking.payment_status, PaymentStatus.PAID)

        intent = await self.payment_provider.create_payment_intent(
            booking.total_amount, self.currency, booking
        )
        await self.lifecycle.store_payment_ref(booking.id, intent.provider_ref)
        logger.info(f"[PAYMENT] Started payment {intent.provider_ref} for booking {booking.id}")

        return PaymentIntentResponse(
            booking_id=booking.id,
            provider_ref=intent.provider_ref,
            client_secret=intent.client_secret,
            amount=booking.total_amount,
            currency=self.currency,
        )

    async def notify_payment_outcome(
        self,
        booking_id: int,
        provider_ref: str,
        succeeded: bool,
    ) -> Optional[BookingRead]:
        return await self.lifecycle.record_payment_outcome(booking_id, provider_ref, succeeded)

    async def cancel_booking(self, booking_id: int) -> Optional[BookingRead]:
        return await self.lifecycle.cancel_booking(booking_id)

    async def get_manifest(self, trip_id: int) -> list[ManifestRow]:
        return await self.manifest.generate(trip_id)

    # Admin overview

    async def dashboard(self, as_of: Optional[datetime] = None) -> DashboardStats:
        as_of = as_of or self.clock()
        upcoming = await self.registry.list_upcoming(DASHBOARD_UPCOMING_LIMIT, as_of)

        counts = {status: await self.ledger.count_by_status(status) for status in BookingStatus}
        confirmed = await self.ledger.list_by_status(BookingStatus.CONFIRMED)

        return DashboardStats(
            upcoming_trips=[await self.with_availability(trip, as_of) for trip in upcoming],
            bookings_by_status=counts,
            seats_sold=sum(b.number_of_seats for b in confirmed),
        )


def get_booking_service(request: Request) -> BookingService:
    """Dependency returning the service built at application startup."""
    return request.app.state.booking_service
