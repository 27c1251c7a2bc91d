"""SQLAlchemy models for the shuttle booking service."""

from shuttle.models.property import Property, PropertyTrip
from shuttle.models.trip import Trip
from shuttle.models.booking import Booking
from shuttle.models.jobs import JobsOutbox

__all__ = [
    "Property",
    "PropertyTrip",
    "Trip",
    "Booking",
    "JobsOutbox",
]
