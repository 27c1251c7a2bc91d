"""API Routers for the shuttle booking service."""

from shuttle.routers.properties import router as properties_router
from shuttle.routers.trips import router as trips_router
from shuttle.routers.bookings import router as bookings_router
from shuttle.routers.payments import router as payments_router
from shuttle.routers.admin import router as admin_router

__all__ = [
    "properties_router",
    "trips_router",
    "bookings_router",
    "payments_router",
    "admin_router",
]
