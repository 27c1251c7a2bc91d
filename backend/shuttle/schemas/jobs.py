"""Outbox job schemas."""

from datetime import datetime
from typing import Any, Optional

from shuttle.models.enums import JobStatus
from shuttle.schemas.base import BaseSchema, IDMixin


class JobRead(BaseSchema, IDMixin):
    """Outbox job."""

    type: str
    payload: dict[str, Any]
    status: JobStatus
    unique_scope: str
    attempts: int = 0
    last_error: Optional[str] = None
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
