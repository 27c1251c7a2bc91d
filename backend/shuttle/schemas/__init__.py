"""Pydantic schemas for request/response validation."""

from shuttle.schemas.base import BaseSchema, IDMixin, TimestampMixin
from shuttle.schemas.property import PropertyCreate, PropertyRead, PropertyTripCreate, PropertyTripRead
from shuttle.schemas.trip import AdminTripCreate, TripCreate, TripUpdate, TripRead, TripWithAvailability
from shuttle.schemas.booking import (
    MAX_SEATS_PER_BOOKING,
    BookingCreate,
    BookingDraft,
    BookingRead,
    BookingRejection,
    ManifestRow,
    PaymentIntentResponse,
    PaymentOutcomeRequest,
)
from shuttle.schemas.jobs import JobRead
from shuttle.schemas.dashboard import DashboardStats

__all__ = [
    "BaseSchema",
    "IDMixin",
    "TimestampMixin",
    "PropertyCreate",
    "PropertyRead",
    "PropertyTripCreate",
    "PropertyTripRead",
    "TripCreate",
    "TripUpdate",
    "TripRead",
    "TripWithAvailability",
    "AdminTripCreate",
    "MAX_SEATS_PER_BOOKING",
    "BookingCreate",
    "BookingDraft",
    "BookingRead",
    "BookingRejection",
    "ManifestRow",
    "PaymentIntentResponse",
    "PaymentOutcomeRequest",
    "JobRead",
    "DashboardStats",
]
