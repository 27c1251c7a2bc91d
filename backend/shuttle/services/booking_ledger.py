"""Booking ledger.

Stores bookings exactly as the lifecycle controller hands them over. The
payment and booking status axes have separate mutators; callers compose
them.
"""

import logging
from typing import Optional

from shuttle.models.enums import BookingStatus, PaymentStatus
from shuttle.schemas.booking import BookingDraft, BookingRead
from shuttle.services.store import Store

logger = logging.getLogger(__name__)


class BookingLedger:
    """Service for booking records."""

    def __init__(self, store: Store):
        self.store = store

    async def create(self, draft: BookingDraft) -> BookingRead:
        return await self.store.create_booking(draft)

    async def get(self, booking_id: int) -> Optional[BookingRead]:
        return await self.store.get_booking(booking_id)

    async def list_by_trip(self, trip_id: int) -> list[BookingRead]:
        return await self.store.list_bookings(trip_id=trip_id)

    async def list_by_property(self, property_id: int) -> list[BookingRead]:
        return await self.store.list_bookings(property_id=property_id)

    async def set_payment_status(
        self,
        booking_id: int,
        provider_ref: Optional[str],
        payment_status: PaymentStatus,
    ) -> Optional[BookingRead]:
        """Update payment status and provider reference. Booking status is untouched."""
        return await self.store.update_booking(
            booking_id,
            {"payment_ref": provider_ref, "payment_status": payment_status},
        )

    async def set_booking_status(
        self,
        booking_id: int,
        booking_status: BookingStatus,
    ) -> Optional[BookingRead]:
        return await self.store.update_booking(booking_id, {"booking_status": booking_status})

    async def list_by_status(self, booking_status: BookingStatus) -> list[BookingRead]:
        return await self.store.list_bookings(booking_status=booking_status)

    async def count_by_status(self, booking_status: BookingStatus) -> int:
        return len(await self.list_by_status(booking_status))
