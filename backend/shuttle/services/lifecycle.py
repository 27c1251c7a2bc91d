"""Booking lifecycle controller.

Guards the booking ledger: admission checks capacity before a booking is
written, and payment outcomes move bookings through the status machines
below. Admission is serialized per trip so the availability check and the
booking write cannot interleave with another admission for the same trip.
"""

import logging
from enum import Enum
from typing import Optional

from shuttle.models.enums import BookingStatus, PaymentStatus
from shuttle.schemas.base import BaseSchema
from shuttle.schemas.booking import BookingCreate, BookingDraft, BookingRead
from shuttle.services.availability import AvailabilityCalculator
from shuttle.services.booking_ledger import BookingLedger
from shuttle.services.jobs import JobsService
from shuttle.services.locks import KeyedLocks
from shuttle.services.properties import PropertyDirectory
from shuttle.services.trip_registry import TripRegistry

logger = logging.getLogger(__name__)


# Confirmed and cancelled are terminal
BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.RESERVED: frozenset({
        BookingStatus.CONFIRMED,
        BookingStatus.CANCELLED,
        BookingStatus.WAITLIST,
    }),
    BookingStatus.WAITLIST: frozenset({BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.REFUNDED}),
    PaymentStatus.PAID: frozenset(),
    PaymentStatus.REFUNDED: frozenset(),
}


def can_transition_booking(current: BookingStatus, target: BookingStatus) -> bool:
    return target in BOOKING_TRANSITIONS[current]


def can_transition_payment(current: PaymentStatus, target: PaymentStatus) -> bool:
    return target in PAYMENT_TRANSITIONS[current]


class InvalidTransitionError(ValueError):
    """A status change that the booking or payment state machine forbids."""

    def __init__(self, booking_id: int, current: Enum, target: Enum):
        self.booking_id = booking_id
        self.current = current
        self.target = target
        super().__init__(
            f"Booking {booking_id} cannot move from {current.value} to {target.value}"
        )


class RejectionReason(str, Enum):
    TRIP_NOT_FOUND = "trip_not_found"
    PROPERTY_NOT_FOUND = "property_not_found"
    INSUFFICIENT_SEATS = "insufficient_seats"


class AdmissionResult(BaseSchema):
    """Outcome of an admission attempt: a booking or a rejection reason."""

    booking: Optional[BookingRead] = None
    reason: Optional[RejectionReason] = None
    seats_available: Optional[int] = None

    @property
    def admitted(self) -> bool:
        return self.booking is not None

    @classmethod
    def rejected(cls, reason: RejectionReason, seats_available: Optional[int] = None) -> "AdmissionResult":
        return cls(reason=reason, seats_available=seats_available)


class BookingLifecycleController:
    """Admits bookings and applies payment outcomes."""

    def __init__(
        self,
        registry: TripRegistry,
        properties: PropertyDirectory,
        ledger: BookingLedger,
        availability: AvailabilityCalculator,
        jobs: JobsService,
    ):
        self.registry = registry
        self.properties = properties
        self.ledger = ledger
        self.availability = availability
        self.jobs = jobs
        self.trip_locks = KeyedLocks()
        self.booking_locks = KeyedLocks()

    async def admit_booking(self, data: BookingCreate) -> AdmissionResult:
        """Admit a booking as reserved/pending if the trip has room.

        Preconditions are checked in order: trip exists, property exists,
        enough seats. A rejection writes nothing.
        """
        async with self.trip_locks.hold(data.trip_id):
            trip = await self.registry.get(data.trip_id)
            if not trip:
                logger.info(f"[BOOKING] Rejected: trip {data.trip_id} not found")
                return AdmissionResult.rejected(RejectionReason.TRIP_NOT_FOUND)

            prop = await self.properties.get(data.property_id)
            if not prop:
                logger.info(f"[BOOKING] Rejected: property {data.property_id} not found")
                return AdmissionResult.rejected(RejectionReason.PROPERTY_NOT_FOUND)

            seats_available = await self.availability.seats_available_for(trip)
            if seats_available < data.number_of_seats:
                logger.info(
                    f"[BOOKING] Rejected: trip {trip.id} has {seats_available} seats, "
                    f"{data.number_of_seats} requested"
                )
                return AdmissionResult.rejected(RejectionReason.INSUFFICIENT_SEATS, seats_available)

            draft = BookingDraft(
                **data.model_dump(),
                total_amount=data.number_of_seats * trip.price_per_seat,
                payment_status=PaymentStatus.PENDING,
                booking_status=BookingStatus.RESERVED,
            )
            booking = await self.ledger.create(draft)

        logger.info(
            f"[BOOKING] Reserved booking {booking.id}: {booking.number_of_seats} seats on trip {trip.id}"
        )
        return AdmissionResult(booking=booking)

    async def record_payment_outcome(
        self,
        booking_id: int,
        provider_ref: str,
        succeeded: bool,
    ) -> Optional[BookingRead]:
        """Apply a payment provider outcome. Safe to call repeatedly.

        Returns None when the booking does not exist.
        """
        async with self.booking_locks.hold(booking_id):
            booking = await self.ledger.get(booking_id)
            if not booking:
                return None
            if succeeded:
                return await self._apply_payment_success(booking, provider_ref)
            return await self._apply_payment_failure(booking, provider_ref)

    async def _apply_payment_success(self, booking: BookingRead, provider_ref: str) -> BookingRead:
        if booking.payment_status != PaymentStatus.PAID:
            if not can_transition_payment(booking.payment_status, PaymentStatus.PAID):
                raise InvalidTransitionError(booking.id, booking.payment_status, PaymentStatus.PAID)
            booking = await self.ledger.set_payment_status(booking.id, provider_ref, PaymentStatus.PAID)
            logger.info(f"[PAYMENT] Booking {booking.id} paid ({provider_ref})")

        if booking.booking_status == BookingStatus.CONFIRMED:
            # Redelivery re-enqueues a confirmation lost to a failed write; the
            # outbox drops it when one already exists
            await self.jobs.enqueue_booking_confirmation(booking)
            return booking

        if not can_transition_booking(booking.booking_status, BookingStatus.CONFIRMED):
            logger.warning(
                f"[PAYMENT] Booking {booking.id} paid while {booking.booking_status.value}; "
                f"booking status left unchanged"
            )
            return booking

        booking = await self.ledger.set_booking_status(booking.id, BookingStatus.CONFIRMED)
        await self.jobs.enqueue_booking_confirmation(booking)
        logger.info(f"[BOOKING] Confirmed booking {booking.id}")
        return booking

    async def _apply_payment_failure(self, booking: BookingRead, provider_ref: str) -> BookingRead:
        if booking.payment_status != PaymentStatus.PENDING:
            logger.warning(
                f"[PAYMENT] Ignoring failed outcome for booking {booking.id} "
                f"with payment status {booking.payment_status.value}"
            )
            return booking

        if booking.payment_ref != provider_ref:
            booking = await self.ledger.set_payment_status(booking.id, provider_ref, PaymentStatus.PENDING)
        logger.info(f"[PAYMENT] Payment failed for booking {booking.id} ({provider_ref})")
        return booking

    async def cancel_booking(self, booking_id: int) -> Optional[BookingRead]:
        """Cancel a reserved or waitlisted booking, releasing its seats."""
        async with self.booking_locks.hold(booking_id):
            booking = await self.ledger.get(booking_id)
            if not booking:
                return None
            if booking.booking_status == BookingStatus.CANCELLED:
                return booking
            if not can_transition_booking(booking.booking_status, BookingStatus.CANCELLED):
                raise InvalidTransitionError(booking.id, booking.booking_status, BookingStatus.CANCELLED)

            booking = await self.ledger.set_booking_status(booking.id, BookingStatus.CANCELLED)
        logger.info(f"[BOOKING] Cancelled booking {booking.id}")
        return booking

    async def store_payment_ref(self, booking_id: int, provider_ref: str) -> Optional[BookingRead]:
        """Attach a freshly created provider reference to a pending booking."""
        async with self.booking_locks.hold(booking_id):
            booking = await self.ledger.get(booking_id)
            if not booking:
                return None
            if booking.payment_status != PaymentStatus.PENDING:
                raise InvalidTransitionError(booking.id, booking.payment_status, PaymentStatus.PENDING)
            return await self.ledger.set_payment_status(booking.id, provider_ref, PaymentStatus.PENDING)
