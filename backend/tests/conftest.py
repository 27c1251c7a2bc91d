"""Shared fixtures: an in-memory booking service with a fixed clock."""

import os

# Must be set before shuttle.main runs its environment validation
os.environ["DEBUG"] = "true"
os.environ["STORE_BACKEND"] = "memory"
os.environ["PAYMENT_PROVIDER"] = "fake"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["ALLOWED_ORIGINS"] = "http://localhost:5173"
os.environ.pop("STRIPE_WEBHOOK_SECRET", None)
os.environ.pop("DATABASE_URL", None)

import hashlib
import hmac
import time
from datetime import datetime, timedelta
from typing import Optional

import pytest

from shuttle.models.enums import BookingStatus, PaymentStatus
from shuttle.schemas.booking import BookingCreate, BookingDraft
from shuttle.schemas.property import PropertyCreate
from shuttle.schemas.trip import TripCreate
from shuttle.services.booking_service import BookingService
from shuttle.services.payments import FakePaymentProvider
from shuttle.services.store import MemoryStore

NOW = datetime(2026, 6, 1, 12, 0)
ADMIN_HEADERS = {"X-Admin-Key": "test-admin-key"}


def stripe_signature(payload: bytes, secret: str, timestamp: Optional[int] = None) -> str:
    """A Stripe-Signature header value for payload, as Stripe would send it."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.".encode() + payload
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def property_data(slug: str = "greenacres", name: str = "Green Acres Community") -> PropertyCreate:
    return PropertyCreate(
        name=name,
        slug=slug,
        address="123 Green Acres Ln",
        city="Atlanta",
        state="GA",
        zip_code="30301",
        contact_phone="555-123-4567",
        contact_email="info@greenacres.com",
        meeting_point="Green Acres Community Center",
    )


def trip_data(
    departure: datetime = NOW + timedelta(days=7),
    max_capacity: int = 30,
    price_per_seat: int = 3500,
    is_active: bool = True,
    booking_close_hours: int = 24,
) -> TripCreate:
    return TripCreate(
        departure_date=departure,
        return_date=departure + timedelta(hours=8),
        departure_time="9:00 AM",
        return_time="5:00 PM",
        max_capacity=max_capacity,
        price_per_seat=price_per_seat,
        is_active=is_active,
        booking_close_hours=booking_close_hours,
        departure_location="Community Center",
        return_location="Casino Main Entrance",
    )


def booking_request(trip_id: int, property_id: int, seats: int = 1, name: str = "John Smith") -> BookingCreate:
    return BookingCreate(
        trip_id=trip_id,
        property_id=property_id,
        customer_name=name,
        customer_email="john.smith@example.com",
        customer_phone="555-111-2222",
        number_of_seats=seats,
    )


def booking_draft(
    trip_id: int,
    property_id: int,
    seats: int = 1,
    booking_status: BookingStatus = BookingStatus.RESERVED,
    payment_status: PaymentStatus = PaymentStatus.PENDING,
    name: str = "John Smith",
) -> BookingDraft:
    """A ledger record written directly, bypassing admission."""
    return BookingDraft(
        **booking_request(trip_id, property_id, seats, name).model_dump(),
        total_amount=seats * 3500,
        booking_status=booking_status,
        payment_status=payment_status,
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def payment_provider():
    return FakePaymentProvider()


@pytest.fixture
def service(store, payment_provider):
    return BookingService(store, payment_provider, currency="usd", clock=lambda: NOW)


@pytest.fixture
async def prop(service):
    return await service.create_property(property_data())


@pytest.fixture
async def trip(service, prop):
    return await service.create_trip(trip_data(), [prop.id])
