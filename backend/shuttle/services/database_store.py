"""SQLAlchemy-backed store.

Each call runs in its own short session and transaction. Connection-level
failures surface as StoreUnavailableError; nothing is retried here.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from shuttle.core.database import get_engine, get_session_factory
from shuttle.models.booking import Booking
from shuttle.models.enums import BookingStatus, JobStatus
from shuttle.models.jobs import JobsOutbox
from shuttle.models.property import Property, PropertyTrip
from shuttle.models.trip import Trip
from shuttle.schemas.booking import BookingDraft, BookingRead
from shuttle.schemas.jobs import JobRead
from shuttle.schemas.property import PropertyCreate, PropertyRead, PropertyTripRead
from shuttle.schemas.trip import TripCreate, TripRead
from shuttle.services.store import Store, StoreUnavailableError

logger = logging.getLogger(__name__)


class DatabaseStore(Store):
    """Store over the relational schema in shuttle.models."""

    def __init__(self, session_factory: async_sessionmaker, engine: Optional[AsyncEngine] = None):
        self.session_factory = session_factory
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str, **engine_kwargs) -> "DatabaseStore":
        engine = get_engine(database_url, **engine_kwargs)
        return cls(get_session_factory(engine), engine)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_factory() as session:
                yield session
        except (OperationalError, InterfaceError, OSError) as e:
            logger.error(f"[STORE] Database unavailable: {e}")
            raise StoreUnavailableError(str(e)) from e

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()

    # Properties

    async def create_property(self, data: PropertyCreate) -> PropertyRead:
        async with self._session() as db:
            prop = Property(**data.model_dump())
            db.add(prop)
            await db.commit()
            return PropertyRead.model_validate(prop)

    async def get_property(self, property_id: int) -> Optional[PropertyRead]:
        async with self._session() as db:
            prop = await db.get(Property, property_id)
            return PropertyRead.model_validate(prop) if prop else None

    async def get_property_by_slug(self, slug: str) -> Optional[PropertyRead]:
        async with self._session() as db:
            result = await db.execute(select(Property).where(Property.slug == slug))
            prop = result.scalar_one_or_none()
            return PropertyRead.model_validate(prop) if prop else None

    async def list_properties(self) -> list[PropertyRead]:
        async with self._session() as db:
            result = await db.execute(select(Property).order_by(Property.id))
            return [PropertyRead.model_validate(p) for p in result.scalars().all()]

    # Property <-> trip associations

    async def _find_link(self, db: AsyncSession, property_id: int, trip_id: int) -> Optional[PropertyTrip]:
        result = await db.execute(
            select(PropertyTrip).where(
                PropertyTrip.property_id == property_id,
                PropertyTrip.trip_id == trip_id,
            )
        )
        return result.scalar_one_or_none()

    async def assign_trip_to_property(self, property_id: int, trip_id: int) -> PropertyTripRead:
        async with self._session() as db:
            existing = await self._find_link(db, property_id, trip_id)
            if existing:
                return PropertyTripRead.model_validate(existing)

            link = PropertyTrip(property_id=property_id, trip_id=trip_id)
            db.add(link)
            try:
                await db.commit()
            except IntegrityError:
                # Lost a race against the same assignment
                await db.rollback()
                existing = await self._find_link(db, property_id, trip_id)
                if existing is None:
                    raise
                return PropertyTripRead.model_validate(existing)
            return PropertyTripRead.model_validate(link)

    async def list_trip_ids_for_property(self, property_id: int) -> list[int]:
        async with self._session() as db:
            result = await db.execute(
                select(PropertyTrip.trip_id)
                .where(PropertyTrip.property_id == property_id)
                .order_by(PropertyTrip.id)
            )
            return list(result.scalars().all())

    async def list_property_ids_for_trip(self, trip_id: int) -> list[int]:
        async with self._session() as db:
            result = await db.execute(
                select(PropertyTrip.property_id)
                .where(PropertyTrip.trip_id == trip_id)
                .order_by(PropertyTrip.id)
            )
            return list(result.scalars().all())

    # Trips

    async def create_trip(self, data: TripCreate) -> TripRead:
        async with self._session() as db:
            trip = Trip(**data.model_dump())
            db.add(trip)
            await db.commit()
            return TripRead.model_validate(trip)

    async def get_trip(self, trip_id: int) -> Optional[TripRead]:
        async with self._session() as db:
            trip = await db.get(Trip, trip_id)
            return TripRead.model_validate(trip) if trip else None

    async def update_trip(self, trip_id: int, fields: dict[str, Any]) -> Optional[TripRead]:
        async with self._session() as db:
            trip = await db.get(Trip, trip_id)
            if not trip:
                return None
            for key, value in fields.items():
                setattr(trip, key, value)
            await db.commit()
            return TripRead.model_validate(trip)

    async def list_trips(
        self,
        departing_from: Optional[datetime] = None,
        departing_until: Optional[datetime] = None,
        active_only: bool = False,
    ) -> list[TripRead]:
        query = select(Trip)
        if departing_from is not None:
            query = query.where(Trip.departure_date >= departing_from)
        if departing_until is not None:
            query = query.where(Trip.departure_date <= departing_until)
        if active_only:
            query = query.where(Trip.is_active.is_(True))
        query = query.order_by(Trip.departure_date, Trip.id)

        async with self._session() as db:
            result = await db.execute(query)
            return [TripRead.model_validate(t) for t in result.scalars().all()]

    # Bookings

    async def create_booking(self, draft: BookingDraft) -> BookingRead:
        async with self._session() as db:
            now = datetime.utcnow()
            booking = Booking(**draft.model_dump(), created_at=now, updated_at=now)
            db.add(booking)
            await db.commit()
            return BookingRead.model_validate(booking)

    async def get_booking(self, booking_id: int) -> Optional[BookingRead]:
        async with self._session() as db:
            booking = await db.get(Booking, booking_id)
            return BookingRead.model_validate(booking) if booking else None

    async def list_bookings(
        self,
        trip_id: Optional[int] = None,
        property_id: Optional[int] = None,
        booking_status: Optional[BookingStatus] = None,
    ) -> list[BookingRead]:
        query = select(Booking)
        if trip_id is not None:
            query = query.where(Booking.trip_id == trip_id)
        if property_id is not None:
            query = query.where(Booking.property_id == property_id)
        if booking_status is not None:
            query = query.where(Booking.booking_status == booking_status)
        query = query.order_by(Booking.id)

        async with self._session() as db:
            result = await db.execute(query)
            return [BookingRead.model_validate(b) for b in result.scalars().all()]

    async def update_booking(self, booking_id: int, fields: dict[str, Any]) -> Optional[BookingRead]:
        async with self._session() as db:
            booking = await db.get(Booking, booking_id)
            if not booking:
                return None
            for key, value in fields.items():
                setattr(booking, key, value)
            booking.updated_at = datetime.utcnow()
            await db.commit()
            return BookingRead.model_validate(booking)

    # Jobs outbox

    async def enqueue_job(
        self,
        job_type: str,
        payload: dict[str, Any],
        unique_scope: str,
    ) -> Optional[JobRead]:
        async with self._session() as db:
            result = await db.execute(
                select(JobsOutbox.id).where(JobsOutbox.unique_scope == unique_scope)
            )
            if result.scalar_one_or_none() is not None:
                return None

            job = JobsOutbox(
                type=job_type,
                payload=payload,
                status=JobStatus.PENDING,
                unique_scope=unique_scope,
                attempts=0,
                created_at=datetime.utcnow(),
            )
            db.add(job)
            try:
                await db.commit()
            except IntegrityError:
                # unique_scope already taken by a concurrent writer
                await db.rollback()
                return None
            return JobRead.model_validate(job)

    async def claim_pending_jobs(self, job_type: Optional[str] = None, limit: int = 10) -> list[JobRead]:
        query = select(JobsOutbox).where(JobsOutbox.status == JobStatus.PENDING)
        if job_type:
            query = query.where(JobsOutbox.type == job_type)
        query = query.order_by(JobsOutbox.id).limit(limit).with_for_update(skip_locked=True)

        async with self._session() as db:
            result = await db.execute(query)
            jobs = result.scalars().all()
            now = datetime.utcnow()
            for job in jobs:
                job.status = JobStatus.PROCESSING
                job.started_at = now
                job.attempts = (job.attempts or 0) + 1
            await db.commit()
            return [JobRead.model_validate(j) for j in jobs]

    async def complete_job(self, job_id: int) -> Optional[JobRead]:
        async with self._session() as db:
            job = await db.get(JobsOutbox, job_id)
            if not job:
                return None
            job.status = JobStatus.COMPLETED
            job.completed_at = datetime.utcnow()
            await db.commit()
            return JobRead.model_validate(job)

    async def fail_job(self, job_id: int, error: str) -> Optional[JobRead]:
        async with self._session() as db:
            job = await db.get(JobsOutbox, job_id)
            if not job:
                return None
            job.status = JobStatus.FAILED
            job.last_error = error
            await db.commit()
            return JobRead.model_validate(job)

    async def list_jobs(self, status: Optional[JobStatus] = None) -> list[JobRead]:
        query = select(JobsOutbox).order_by(JobsOutbox.id)
        if status is not None:
            query = query.where(JobsOutbox.status == status)
        async with self._session() as db:
            result = await db.execute(query)
            return [JobRead.model_validate(j) for j in result.scalars().all()]
