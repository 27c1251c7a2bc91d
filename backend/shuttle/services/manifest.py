"""Passenger manifest per trip."""

from shuttle.models.enums import SEAT_HOLDING_STATUSES
from shuttle.schemas.booking import ManifestRow
from shuttle.services.booking_ledger import BookingLedger
from shuttle.services.properties import PropertyDirectory
from shuttle.services.trip_registry import TripRegistry

UNKNOWN_PROPERTY = "Unknown"


class ManifestProjector:
    """Read-only projection of reserved and confirmed bookings."""

    def __init__(self, registry: TripRegistry, ledger: BookingLedger, properties: PropertyDirectory):
        self.registry = registry
        self.ledger = ledger
        self.properties = properties

    async def generate(self, trip_id: int) -> list[ManifestRow]:
        """Manifest rows ordered by booking id. A missing trip has none."""
        if not await self.registry.get(trip_id):
            return []

        bookings = [
            b for b in await self.ledger.list_by_trip(trip_id)
            if b.booking_status in SEAT_HOLDING_STATUSES
        ]

        property_names: dict[int, str] = {}
        for booking in bookings:
            if booking.property_id not in property_names:
                prop = await self.properties.get(booking.property_id)
                property_names[booking.property_id] = prop.name if prop else UNKNOWN_PROPERTY

        return [
            ManifestRow(
                name=b.customer_name,
                email=b.customer_email,
                phone=b.customer_phone,
                seats=b.number_of_seats,
                property_name=property_names[b.property_id],
                payment_status=b.payment_status,
                booking_id=b.id,
            )
            for b in sorted(bookings, key=lambda b: b.id)
        ]
