"""Trip registry.

Admin is a trusted caller here: trips are stored as given, with schema
validation only. Trips are never deleted; they are deactivated through
the is_active flag.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from shuttle.schemas.property import PropertyTripRead
from shuttle.schemas.trip import TripCreate, TripRead, TripUpdate
from shuttle.services.store import Store

logger = logging.getLogger(__name__)


class TripRegistry:
    """Service for trip definitions and their property associations."""

    def __init__(self, store: Store):
        self.store = store

    async def create(self, data: TripCreate) -> TripRead:
        trip = await self.store.create_trip(data)
        logger.info(f"[TRIP] Created trip {trip.id} departing {trip.departure_date.isoformat()}")
        return trip

    async def update(self, trip_id: int, data: TripUpdate) -> Optional[TripRead]:
        """Apply the fields that were explicitly set. None when the trip is missing."""
        fields = data.model_dump(exclude_unset=True)
        trip = await self.store.update_trip(trip_id, fields)
        if trip:
            logger.info(f"[TRIP] Updated trip {trip_id}: {sorted(fields)}")
        return trip

    async def get(self, trip_id: int) -> Optional[TripRead]:
        return await self.store.get_trip(trip_id)

    async def list_all(self) -> list[TripRead]:
        return await self.store.list_trips()

    async def list_active(self, as_of: datetime) -> list[TripRead]:
        """Active trips departing at or after as_of."""
        return await self.store.list_trips(departing_from=as_of, active_only=True)

    async def list_by_date_range(self, start: datetime, end: datetime) -> list[TripRead]:
        return await self.store.list_trips(departing_from=start, departing_until=end)

    async def list_upcoming(self, limit: int, as_of: datetime) -> list[TripRead]:
        trips = await self.list_active(as_of)
        return trips[:limit]

    async def assign_to_property(self, trip_id: int, property_id: int) -> PropertyTripRead:
        link = await self.store.assign_trip_to_property(property_id, trip_id)
        logger.info(f"[TRIP] Trip {trip_id} offered at property {property_id}")
        return link

    async def list_for_property(self, property_id: int, as_of: datetime) -> list[TripRead]:
        """Active trips offered at a property, departing at or after as_of."""
        trip_ids = set(await self.store.list_trip_ids_for_property(property_id))
        if not trip_ids:
            return []
        return [trip for trip in await self.list_active(as_of) if trip.id in trip_ids]

    @staticmethod
    def is_booking_open(trip: TripRead, as_of: datetime) -> bool:
        if not trip.is_active:
            return False
        closes_at = trip.departure_date - timedelta(hours=trip.booking_close_hours)
        return as_of < closes_at
