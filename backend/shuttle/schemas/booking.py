"""Booking schemas."""

from typing import Optional

from pydantic import EmailStr, Field

from shuttle.models.enums import BookingStatus, PaymentStatus
from shuttle.schemas.base import BaseSchema, IDMixin, TimestampMixin

# Per-booking seat cap offered by the booking form
MAX_SEATS_PER_BOOKING = 4


class BookingCreate(BaseSchema):
    """Customer booking form submission."""

    trip_id: int
    property_id: int
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str = Field(..., min_length=1, max_length=50)
    number_of_seats: int = Field(default=1, ge=1, le=MAX_SEATS_PER_BOOKING)


class BookingDraft(BookingCreate):
    """A booking ready to be written to the ledger.

    The caller decides the initial statuses; the ledger stores them as given.
    """

    total_amount: int = Field(..., ge=0)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    booking_status: BookingStatus = BookingStatus.RESERVED
    payment_ref: Optional[str] = None


class BookingRead(BaseSchema, IDMixin, TimestampMixin):
    """Booking response."""

    trip_id: int
    property_id: int
    customer_name: str
    customer_email: str
    customer_phone: str
    number_of_seats: int
    total_amount: int
    payment_ref: Optional[str] = None
    payment_status: PaymentStatus
    booking_status: BookingStatus


class BookingRejection(BaseSchema):
    """Why a booking was not admitted."""

    reason: str
    detail: str
    seats_available: Optional[int] = None


class PaymentIntentResponse(BaseSchema):
    """Client side handle for completing a payment."""

    booking_id: int
    provider_ref: str
    client_secret: Optional[str] = None
    amount: int
    currency: str


class PaymentOutcomeRequest(BaseSchema):
    """Manually recorded payment outcome."""

    provider_ref: str = Field(..., min_length=1, max_length=255)
    succeeded: bool


class ManifestRow(BaseSchema):
    """One passenger line of a trip manifest."""

    name: str
    email: str
    phone: str
    seats: int
    property_name: str
    payment_status: PaymentStatus
    booking_id: int
