"""Services for the shuttle booking core."""

from shuttle.services.store import Store, MemoryStore, StoreUnavailableError, get_store
from shuttle.services.properties import PropertyDirectory
from shuttle.services.trip_registry import TripRegistry
from shuttle.services.booking_ledger import BookingLedger
from shuttle.services.availability import AvailabilityCalculator
from shuttle.services.jobs import JobsService
from shuttle.services.lifecycle import (
    AdmissionResult,
    BookingLifecycleController,
    InvalidTransitionError,
    RejectionReason,
)
from shuttle.services.manifest import ManifestProjector
from shuttle.services.payments import PaymentProvider, PaymentProviderError, get_payment_provider
from shuttle.services.booking_service import BookingService

__all__ = [
    "Store",
    "MemoryStore",
    "StoreUnavailableError",
    "get_store",
    "PropertyDirectory",
    "TripRegistry",
    "BookingLedger",
    "AvailabilityCalculator",
    "JobsService",
    "AdmissionResult",
    "BookingLifecycleController",
    "InvalidTransitionError",
    "RejectionReason",
    "ManifestProjector",
    "PaymentProvider",
    "PaymentProviderError",
    "get_payment_provider",
    "BookingService",
]
