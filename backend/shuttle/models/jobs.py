"""Jobs outbox model for async side effects with unique_scope de-duplication."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Enum as SQLEnum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shuttle.core.database import Base
from shuttle.models.enums import JobStatus


class JobsOutbox(Base):
    """Async job queue with idempotency via unique_scope.

    unique_scope ensures de-duplication (e.g. "booking_confirmation:booking:42"),
    so a repeated trigger can never produce a second job.
    """

    __tablename__ = "jobs_outbox"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Job type (e.g., "send_booking_confirmation")
    type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    status: Mapped[JobStatus] = mapped_column(
        SQLEnum(JobStatus, name="jobstatus", values_callable=lambda e: [m.value for m in e]),
        default=JobStatus.PENDING,
        nullable=False,
        index=True,
    )

    unique_scope: Mapped[str] = mapped_column(String(500), nullable=False, unique=True)

    # Retry tracking
    attempts: Mapped[int] = mapped_column(Integer, default=0)
    last_error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
