"""Seat availability, computed on demand from the ledger and registry.

Nothing is cached: every call scans the bookings of one trip, so the
answer always reflects the latest committed bookings.
"""

from shuttle.models.enums import SEAT_HOLDING_STATUSES
from shuttle.schemas.booking import BookingRead
from shuttle.schemas.trip import TripRead
from shuttle.services.booking_ledger import BookingLedger
from shuttle.services.trip_registry import TripRegistry


def seats_held(bookings: list[BookingRead]) -> int:
    """Seats consumed by reserved and confirmed bookings."""
    return sum(b.number_of_seats for b in bookings if b.booking_status in SEAT_HOLDING_STATUSES)


class AvailabilityCalculator:
    """Remaining seats per trip."""

    def __init__(self, registry: TripRegistry, ledger: BookingLedger):
        self.registry = registry
        self.ledger = ledger

    async def seats_available(self, trip_id: int) -> int:
        """Remaining seats; a missing trip has none."""
        trip = await self.registry.get(trip_id)
        if not trip:
            return 0
        return await self.seats_available_for(trip)

    async def seats_available_for(self, trip: TripRead) -> int:
        bookings = await self.ledger.list_by_trip(trip.id)
        return max(0, trip.max_capacity - seats_held(bookings))
