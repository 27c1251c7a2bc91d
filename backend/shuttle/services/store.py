"""Store interface over trips, properties, bookings and the jobs outbox.

The registry, ledger and outbox services talk to an injected Store instead
of owning global state. MemoryStore backs tests and local development;
DatabaseStore (services.database_store) backs production.
"""

import itertools
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from shuttle.core.config import Settings, StoreBackend
from shuttle.models.enums import BookingStatus, JobStatus
from shuttle.schemas.booking import BookingDraft, BookingRead
from shuttle.schemas.jobs import JobRead
from shuttle.schemas.property import PropertyCreate, PropertyRead, PropertyTripRead
from shuttle.schemas.trip import TripCreate, TripRead


class StoreUnavailableError(RuntimeError):
    """The backing store could not be reached. Fatal for the current call."""


class Store(ABC):
    """Abstract interface for entity stores."""

    # Properties

    @abstractmethod
    async def create_property(self, data: PropertyCreate) -> PropertyRead:
        pass

    @abstractmethod
    async def get_property(self, property_id: int) -> Optional[PropertyRead]:
        pass

    @abstractmethod
    async def get_property_by_slug(self, slug: str) -> Optional[PropertyRead]:
        pass

    @abstractmethod
    async def list_properties(self) -> list[PropertyRead]:
        pass

    # Property <-> trip associations

    @abstractmethod
    async def assign_trip_to_property(self, property_id: int, trip_id: int) -> PropertyTripRead:
        """Create the association; an existing pair is returned unchanged."""
        pass

    @abstractmethod
    async def list_trip_ids_for_property(self, property_id: int) -> list[int]:
        pass

    @abstractmethod
    async def list_property_ids_for_trip(self, trip_id: int) -> list[int]:
        pass

    # Trips

    @abstractmethod
    async def create_trip(self, data: TripCreate) -> TripRead:
        pass

    @abstractmethod
    async def get_trip(self, trip_id: int) -> Optional[TripRead]:
        pass

    @abstractmethod
    async def update_trip(self, trip_id: int, fields: dict[str, Any]) -> Optional[TripRead]:
        pass

    @abstractmethod
    async def list_trips(
        self,
        departing_from: Optional[datetime] = None,
        departing_until: Optional[datetime] = None,
        active_only: bool = False,
    ) -> list[TripRead]:
        """Trips ordered by departure date, bounds inclusive."""
        pass

    # Bookings

    @abstractmethod
    async def create_booking(self, draft: BookingDraft) -> BookingRead:
        pass

    @abstractmethod
    async def get_booking(self, booking_id: int) -> Optional[BookingRead]:
        pass

    @abstractmethod
    async def list_bookings(
        self,
        trip_id: Optional[int] = None,
        property_id: Optional[int] = None,
        booking_status: Optional[BookingStatus] = None,
    ) -> list[BookingRead]:
        """Bookings ordered by id."""
        pass

    @abstractmethod
    async def update_booking(self, booking_id: int, fields: dict[str, Any]) -> Optional[BookingRead]:
        """Apply fields and bump updated_at."""
        pass

    # Jobs outbox

    @abstractmethod
    async def enqueue_job(
        self,
        job_type: str,
        payload: dict[str, Any],
        unique_scope: str,
    ) -> Optional[JobRead]:
        """Returns None when a job with the same unique_scope exists."""
        pass

    @abstractmethod
    async def claim_pending_jobs(self, job_type: Optional[str] = None, limit: int = 10) -> list[JobRead]:
        pass

    @abstractmethod
    async def complete_job(self, job_id: int) -> Optional[JobRead]:
        pass

    @abstractmethod
    async def fail_job(self, job_id: int, error: str) -> Optional[JobRead]:
        pass

    @abstractmethod
    async def list_jobs(self, status: Optional[JobStatus] = None) -> list[JobRead]:
        pass

    async def close(self) -> None:
        """Release resources held by the store."""


class MemoryStore(Store):
    """Dict-backed store with incrementing integer ids."""

    def __init__(self):
        self._properties: dict[int, PropertyRead] = {}
        self._property_trips: dict[int, PropertyTripRead] = {}
        self._trips: dict[int, TripRead] = {}
        self._bookings: dict[int, BookingRead] = {}
        self._jobs: dict[int, JobRead] = {}

        self._property_ids = itertools.count(1)
        self._property_trip_ids = itertools.count(1)
        self._trip_ids = itertools.count(1)
        self._booking_ids = itertools.count(1)
        self._job_ids = itertools.count(1)

    async def create_property(self, data: PropertyCreate) -> PropertyRead:
        prop = PropertyRead(id=next(self._property_ids), **data.model_dump())
        self._properties[prop.id] = prop
        return prop

    async def get_property(self, property_id: int) -> Optional[PropertyRead]:
        return self._properties.get(property_id)

    async def get_property_by_slug(self, slug: str) -> Optional[PropertyRead]:
        return next((p for p in self._properties.values() if p.slug == slug), None)

    async def list_properties(self) -> list[PropertyRead]:
        return list(self._properties.values())

    async def assign_trip_to_property(self, property_id: int, trip_id: int) -> PropertyTripRead:
        for link in self._property_trips.values():
            if link.property_id == property_id and link.trip_id == trip_id:
                return link
        link = PropertyTripRead(id=next(self._property_trip_ids), property_id=property_id, trip_id=trip_id)
        self._property_trips[link.id] = link
        return link

    async def list_trip_ids_for_property(self, property_id: int) -> list[int]:
        return [pt.trip_id for pt in self._property_trips.values() if pt.property_id == property_id]

    async def list_property_ids_for_trip(self, trip_id: int) -> list[int]:
        return [pt.property_id for pt in self._property_trips.values() if pt.trip_id == trip_id]

    async def create_trip(self, data: TripCreate) -> TripRead:
        trip = TripRead(id=next(self._trip_ids), **data.model_dump())
        self._trips[trip.id] = trip
        return trip

    async def get_trip(self, trip_id: int) -> Optional[TripRead]:
        return self._trips.get(trip_id)

    async def update_trip(self, trip_id: int, fields: dict[str, Any]) -> Optional[TripRead]:
        trip = self._trips.get(trip_id)
        if not trip:
            return None
        updated = TripRead.model_validate({**trip.model_dump(), **fields})
        self._trips[trip_id] = updated
        return updated

    async def list_trips(
        self,
        departing_from: Optional[datetime] = None,
        departing_until: Optional[datetime] = None,
        active_only: bool = False,
    ) -> list[TripRead]:
        trips = list(self._trips.values())
        if departing_from is not None:
            trips = [t for t in trips if t.departure_date >= departing_from]
        if departing_until is not None:
            trips = [t for t in trips if t.departure_date <= departing_until]
        if active_only:
            trips = [t for t in trips if t.is_active]
        return sorted(trips, key=lambda t: (t.departure_date, t.id))

    async def create_booking(self, draft: BookingDraft) -> BookingRead:
        now = datetime.utcnow()
        booking = BookingRead(
            id=next(self._booking_ids),
            created_at=now,
            updated_at=now,
            **draft.model_dump(),
        )
        self._bookings[booking.id] = booking
        return booking

    async def get_booking(self, booking_id: int) -> Optional[BookingRead]:
        return self._bookings.get(booking_id)

    async def list_bookings(
        self,
        trip_id: Optional[int] = None,
        property_id: Optional[int] = None,
        booking_status: Optional[BookingStatus] = None,
    ) -> list[BookingRead]:
        bookings = list(self._bookings.values())
        if trip_id is not None:
            bookings = [b for b in bookings if b.trip_id == trip_id]
        if property_id is not None:
            bookings = [b for b in bookings if b.property_id == property_id]
        if booking_status is not None:
            bookings = [b for b in bookings if b.booking_status == booking_status]
        return sorted(bookings, key=lambda b: b.id)

    async def update_booking(self, booking_id: int, fields: dict[str, Any]) -> Optional[BookingRead]:
        booking = self._bookings.get(booking_id)
        if not booking:
            return None
        updated = booking.model_copy(update={**fields, "updated_at": datetime.utcnow()})
        self._bookings[booking_id] = updated
        return updated

    async def enqueue_job(
        self,
        job_type: str,
        payload: dict[str, Any],
        unique_scope: str,
    ) -> Optional[JobRead]:
        if any(job.unique_scope == unique_scope for job in self._jobs.values()):
            return None
        job = JobRead(
            id=next(self._job_ids),
            type=job_type,
            payload=payload,
            status=JobStatus.PENDING,
            unique_scope=unique_scope,
            created_at=datetime.utcnow(),
        )
        self._jobs[job.id] = job
        return job

    async def claim_pending_jobs(self, job_type: Optional[str] = None, limit: int = 10) -> list[JobRead]:
        pending = [
            job for job in self._jobs.values()
            if job.status == JobStatus.PENDING and (job_type is None or job.type == job_type)
        ]
        claimed = []
        for job in sorted(pending, key=lambda j: j.id)[:limit]:
            updated = job.model_copy(update={
                "status": JobStatus.PROCESSING,
                "started_at": datetime.utcnow(),
                "attempts": job.attempts + 1,
            })
            self._jobs[job.id] = updated
            claimed.append(updated)
        return claimed

    async def complete_job(self, job_id: int) -> Optional[JobRead]:
        job = self._jobs.get(job_id)
        if not job:
            return None
        updated = job.model_copy(update={
            "status": JobStatus.COMPLETED,
            "completed_at": datetime.utcnow(),
        })
        self._jobs[job_id] = updated
        return updated

    async def fail_job(self, job_id: int, error: str) -> Optional[JobRead]:
        job = self._jobs.get(job_id)
        if not job:
            return None
        updated = job.model_copy(update={"status": JobStatus.FAILED, "last_error": error})
        self._jobs[job_id] = updated
        return updated

    async def list_jobs(self, status: Optional[JobStatus] = None) -> list[JobRead]:
        jobs = sorted(self._jobs.values(), key=lambda j: j.id)
        if status is not None:
            jobs = [j for j in jobs if j.status == status]
        return jobs


def get_store(settings: Settings) -> Store:
    """Factory function to get the store based on config."""
    if settings.store_backend == StoreBackend.DATABASE:
        from shuttle.services.database_store import DatabaseStore

        return DatabaseStore.from_url(settings.database_url)
    return MemoryStore()
