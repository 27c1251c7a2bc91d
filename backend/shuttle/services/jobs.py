"""Jobs outbox service for async side effects.

Side effects of a state change (confirmation emails) are recorded as
outbox jobs instead of being fired inline. The unique_scope of a job makes
enqueueing idempotent: a second enqueue for the same scope is a no-op.
"""

import logging
from typing import Any, Optional

from shuttle.schemas.booking import BookingRead
from shuttle.schemas.jobs import JobRead
from shuttle.services.store import Store

logger = logging.getLogger(__name__)

BOOKING_CONFIRMATION_JOB = "send_booking_confirmation"


class JobsService:
    """Service for managing async jobs via outbox pattern."""

    def __init__(self, store: Store):
        self.store = store

    async def enqueue(
        self,
        job_type: str,
        payload: dict[str, Any],
        unique_scope: str,
    ) -> Optional[int]:
        """Enqueue a job with unique_scope de-duplication.

        Returns the new job id, or None when a job with the same
        unique_scope already exists.
        """
        job = await self.store.enqueue_job(job_type, payload, unique_scope)
        if job is None:
            logger.info(f"[JOBS] Skipped duplicate {job_type} for {unique_scope}")
            return None
        logger.info(f"[JOBS] Enqueued {job_type} job {job.id}")
        return job.id

    async def enqueue_booking_confirmation(self, booking: BookingRead) -> Optional[int]:
        """Enqueue the confirmation notice for a confirmed booking."""
        return await self.enqueue(
            job_type=BOOKING_CONFIRMATION_JOB,
            payload={
                "booking_id": booking.id,
                "trip_id": booking.trip_id,
                "customer_email": booking.customer_email,
                "number_of_seats": booking.number_of_seats,
            },
            unique_scope=f"booking_confirmation:booking:{booking.id}",
        )

    async def claim_pending(self, job_type: Optional[str] = None, limit: int = 10) -> list[JobRead]:
        """Claim pending jobs, marking them processing."""
        return await self.store.claim_pending_jobs(job_type, limit)

    async def complete(self, job_id: int) -> Optional[JobRead]:
        return await self.store.complete_job(job_id)

    async def fail(self, job_id: int, error: str) -> Optional[JobRead]:
        logger.warning(f"[JOBS] Job {job_id} failed: {error}")
        return await self.store.fail_job(job_id, error)

    async def list_jobs(self) -> list[JobRead]:
        return await self.store.list_jobs()
