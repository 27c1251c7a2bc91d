"""Property and property-trip association models."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shuttle.core.database import Base

if TYPE_CHECKING:
    from shuttle.models.booking import Booking
    from shuttle.models.trip import Trip


class Property(Base):
    """A residential community with its own booking page."""

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # URL key, e.g. "greenacres"
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)

    # Address
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(50), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)

    contact_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meeting_point: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    trip_links: Mapped[list["PropertyTrip"]] = relationship(
        "PropertyTrip", back_populates="property", cascade="all, delete-orphan"
    )
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="property")


class PropertyTrip(Base):
    """Which trips are offered on which property's booking page."""

    __tablename__ = "property_trips"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    trip_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("trips.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    property: Mapped["Property"] = relationship("Property", back_populates="trip_links")
    trip: Mapped["Trip"] = relationship("Trip", back_populates="property_links")

    __table_args__ = (
        UniqueConstraint("property_id", "trip_id", name="uq_property_trips_property_trip"),
    )
