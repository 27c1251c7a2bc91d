"""Enumeration types for the shuttle booking domain model."""

from enum import Enum


class BookingStatus(str, Enum):
    """Fulfillment status of a booking."""
    RESERVED = "reserved"      # Seats held, awaiting payment
    CONFIRMED = "confirmed"    # Paid and confirmed
    CANCELLED = "cancelled"    # Payment failed or cancelled by admin
    WAITLIST = "waitlist"      # Oversubscription detected after the fact


class PaymentStatus(str, Enum):
    """Payment status of a booking."""
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class JobStatus(str, Enum):
    """Status of async job in outbox."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


# Bookings in these states hold seats on their trip
SEAT_HOLDING_STATUSES = frozenset({BookingStatus.RESERVED, BookingStatus.CONFIRMED})
