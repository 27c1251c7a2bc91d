"""Booking model."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, Enum as SQLEnum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shuttle.core.database import Base
from shuttle.models.enums import BookingStatus, PaymentStatus

if TYPE_CHECKING:
    from shuttle.models.property import Property
    from shuttle.models.trip import Trip


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Booking(Base):
    """A customer's reservation of seats on a trip.

    Payment status and booking status move independently; a successful
    payment is what confirms a reserved booking. Bookings are never deleted.
    """

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trip_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("trips.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    # Originating community, used for manifest grouping
    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(50), nullable=False)

    number_of_seats: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    total_amount: Mapped[int] = mapped_column(Integer, nullable=False)  # cents

    # Set once a payment attempt has been made
    payment_ref: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)

    payment_status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus, name="paymentstatus", values_callable=_enum_values),
        default=PaymentStatus.PENDING,
        nullable=False,
        index=True,
    )
    booking_status: Mapped[BookingStatus] = mapped_column(
        SQLEnum(BookingStatus, name="bookingstatus", values_callable=_enum_values),
        default=BookingStatus.RESERVED,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    trip: Mapped["Trip"] = relationship("Trip", back_populates="bookings")
    property: Mapped["Property"] = relationship("Property", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("number_of_seats >= 1", name="ck_bookings_number_of_seats"),
    )
