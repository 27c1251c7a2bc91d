"""Development sample data: two communities, two casino trips, two paid bookings."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from shuttle.schemas.booking import BookingCreate
from shuttle.schemas.property import PropertyCreate
from shuttle.schemas.trip import TripCreate
from shuttle.services.booking_service import BookingService

logger = logging.getLogger(__name__)

SAMPLE_PROPERTIES = [
    PropertyCreate(
        name="Green Acres Community",
        slug="greenacres",
        address="123 Green Acres Ln",
        city="Atlanta",
        state="GA",
        zip_code="30301",
        contact_phone="555-123-4567",
        contact_email="info@greenacres.com",
        meeting_point="Green Acres Community Center",
    ),
    PropertyCreate(
        name="Sunnydale Retirement Community",
        slug="sunnydale",
        address="456 Sunny Way",
        city="Savannah",
        state="GA",
        zip_code="31401",
        contact_phone="555-987-6543",
        contact_email="info@sunnydale.com",
        meeting_point="Sunnydale Main Lobby",
    ),
]

SAMPLE_BOOKINGS = [
    ("John Smith", "john.smith@example.com", "555-111-2222", 2, "pi_mock_123456"),
    ("Jane Doe", "jane.doe@example.com", "555-333-4444", 1, "pi_mock_789012"),
]


def sample_trip(departure: datetime) -> TripCreate:
    return TripCreate(
        departure_date=departure,
        return_date=departure + timedelta(hours=8),
        departure_time="9:00 AM",
        return_time="5:00 PM",
        max_capacity=30,
        price_per_seat=3500,
        is_active=True,
        booking_close_hours=24,
        departure_location="Community Center",
        return_location="Casino Main Entrance",
    )


async def seed_sample_data(service: BookingService, now: Optional[datetime] = None) -> bool:
    """Load the sample data into an empty store. Returns False if data already exists."""
    if await service.list_properties():
        logger.info("[SEED] Store already has properties, skipping sample data")
        return False

    now = now or service.clock()
    base = now.replace(hour=9, minute=0, second=0, microsecond=0)

    properties = [await service.create_property(data) for data in SAMPLE_PROPERTIES]
    property_ids = [prop.id for prop in properties]

    trips = [
        await service.create_trip(sample_trip(base + timedelta(weeks=weeks)), property_ids)
        for weeks in (1, 2)
    ]

    for (name, email, phone, seats, ref), prop in zip(SAMPLE_BOOKINGS, properties):
        result = await service.submit_booking(
            BookingCreate(
                trip_id=trips[0].id,
                property_id=prop.id,
                customer_name=name,
                customer_email=email,
                customer_phone=phone,
                number_of_seats=seats,
            )
        )
        await service.notify_payment_outcome(result.booking.id, ref, succeeded=True)

    logger.info(f"[SEED] Loaded {len(properties)} properties and {len(trips)} trips")
    return True
