"""Admin dashboard schemas."""

from shuttle.models.enums import BookingStatus
from shuttle.schemas.base import BaseSchema
from shuttle.schemas.trip import TripWithAvailability


class DashboardStats(BaseSchema):
    """Upcoming trips and booking counts for the admin overview."""

    upcoming_trips: list[TripWithAvailability]
    bookings_by_status: dict[BookingStatus, int]
    seats_sold: int
