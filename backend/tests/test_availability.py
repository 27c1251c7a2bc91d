"""Seat availability accounting."""

import pytest

from conftest import booking_draft, trip_data
from shuttle.models.enums import BookingStatus
from shuttle.services.availability import seats_held


async def test_new_trip_has_full_capacity(service, trip):
    assert await service.availability.seats_available(trip.id) == 30


async def test_missing_trip_has_no_seats(service):
    assert await service.availability.seats_available(999) == 0


@pytest.mark.parametrize(
    "booking_status, holds_seats",
    [
        (BookingStatus.RESERVED, True),
        (BookingStatus.CONFIRMED, True),
        (BookingStatus.CANCELLED, False),
        (BookingStatus.WAITLIST, False),
    ],
)
async def test_only_reserved_and_confirmed_consume_capacity(service, trip, prop, booking_status, holds_seats):
    await service.ledger.create(booking_draft(trip.id, prop.id, seats=3, booking_status=booking_status))

    expected = 27 if holds_seats else 30
    assert await service.availability.seats_available(trip.id) == expected


async def test_availability_matches_formula(service, trip, prop):
    statuses = [
        (2, BookingStatus.CONFIRMED),
        (4, BookingStatus.RESERVED),
        (3, BookingStatus.CANCELLED),
        (1, BookingStatus.WAITLIST),
        (1, BookingStatus.RESERVED),
    ]
    for seats, status in statuses:
        await service.ledger.create(booking_draft(trip.id, prop.id, seats=seats, booking_status=status))

    bookings = await service.ledger.list_by_trip(trip.id)
    assert seats_held(bookings) == 7
    assert await service.availability.seats_available(trip.id) == 23


async def test_availability_never_negative(service, prop):
    small = await service.create_trip(trip_data(max_capacity=2), [prop.id])
    # Written straight to the ledger, so admission cannot stop it
    await service.ledger.create(booking_draft(small.id, prop.id, seats=4))

    assert await service.availability.seats_available(small.id) == 0


async def test_bookings_on_other_trips_do_not_count(service, trip, prop):
    other = await service.create_trip(trip_data(), [prop.id])
    await service.ledger.create(booking_draft(other.id, prop.id, seats=4))

    assert await service.availability.seats_available(trip.id) == 30
    assert await service.availability.seats_available(other.id) == 26


async def test_capacity_change_is_reflected_immediately(service, trip, prop):
    await service.ledger.create(booking_draft(trip.id, prop.id, seats=4))
    await service.store.update_trip(trip.id, {"max_capacity": 5})

    assert await service.availability.seats_available(trip.id) == 1
