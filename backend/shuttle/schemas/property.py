"""Property schemas."""

from typing import Optional

from pydantic import EmailStr, Field

from shuttle.schemas.base import BaseSchema, IDMixin


class PropertyCreate(BaseSchema):
    """Create a new property (community booking page)."""

    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=50)
    zip_code: str = Field(..., min_length=1, max_length=20)
    contact_phone: Optional[str] = Field(None, max_length=50)
    contact_email: Optional[EmailStr] = None
    meeting_point: str = Field(..., min_length=1, max_length=255)


class PropertyRead(PropertyCreate, IDMixin):
    """Property response."""


class PropertyTripCreate(BaseSchema):
    """Offer a trip on a property's booking page."""

    property_id: int


class PropertyTripRead(BaseSchema, IDMixin):
    """Property-trip association."""

    property_id: int
    trip_id: int
