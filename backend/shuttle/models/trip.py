"""Trip model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shuttle.core.database import Base

if TYPE_CHECKING:
    from shuttle.models.booking import Booking
    from shuttle.models.property import PropertyTrip


class Trip(Base):
    """A scheduled shuttle departure and return with fixed capacity and price.

    Trips are never deleted; admins deactivate them through is_active.
    """

    __tablename__ = "trips"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    departure_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    return_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    # Display times, e.g. "9:00 AM"
    departure_time: Mapped[str] = mapped_column(String(20), nullable=False)
    return_time: Mapped[str] = mapped_column(String(20), nullable=False)

    max_capacity: Mapped[int] = mapped_column(Integer, default=30, nullable=False)
    price_per_seat: Mapped[int] = mapped_column(Integer, nullable=False)  # cents
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # Booking closes this many hours before departure
    booking_close_hours: Mapped[int] = mapped_column(Integer, default=24, nullable=False)

    departure_location: Mapped[str] = mapped_column(String(255), nullable=False)
    return_location: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    property_links: Mapped[list["PropertyTrip"]] = relationship(
        "PropertyTrip", back_populates="trip", cascade="all, delete-orphan"
    )
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="trip")

    __table_args__ = (
        CheckConstraint("max_capacity >= 1", name="ck_trips_max_capacity"),
        CheckConstraint("price_per_seat >= 0", name="ck_trips_price_per_seat"),
    )
