"""Trip schemas."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, field_validator

from shuttle.schemas.base import BaseSchema, IDMixin


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Trip times are stored and compared as naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class TripCreate(BaseSchema):
    """Create a new trip."""

    departure_date: datetime
    return_date: datetime
    departure_time: str = Field(..., min_length=1, max_length=20)
    return_time: str = Field(..., min_length=1, max_length=20)
    max_capacity: int = Field(default=30, ge=1)
    price_per_seat: int = Field(..., ge=0)  # cents
    is_active: bool = True
    booking_close_hours: int = Field(default=24, ge=0)
    departure_location: str = Field(..., min_length=1, max_length=255)
    return_location: str = Field(..., min_length=1, max_length=255)

    @field_validator("departure_date", "return_date")
    @classmethod
    def normalize_dates(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class TripUpdate(BaseSchema):
    """Update a trip. Any field except the identifier.

    Omitted fields are left alone; an explicit null is rejected since every
    trip field is required on the stored trip.
    """

    departure_date: Optional[datetime] = None
    return_date: Optional[datetime] = None
    departure_time: Optional[str] = Field(None, min_length=1, max_length=20)
    return_time: Optional[str] = Field(None, min_length=1, max_length=20)
    max_capacity: Optional[int] = Field(None, ge=1)
    price_per_seat: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    booking_close_hours: Optional[int] = Field(None, ge=0)
    departure_location: Optional[str] = Field(None, min_length=1, max_length=255)
    return_location: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    @field_validator("departure_date", "return_date")
    @classmethod
    def normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class TripRead(TripCreate, IDMixin):
    """Trip response."""


class TripWithAvailability(TripRead):
    """Trip with its live seat count."""

    seats_available: int
    booking_open: bool


class AdminTripCreate(TripCreate):
    """Create a trip and offer it at the given properties."""

    property_ids: list[int] = Field(default_factory=list)

    def trip_fields(self) -> TripCreate:
        return TripCreate(**self.model_dump(exclude={"property_ids"}))
