"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Numeric, String, UniqueConstraint, func, text
from sqlalchemy.dialects.postgresql import UUID, ExcludeConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.domain.booking_state import BookingStatus

if TYPE_CHECKING:
    from app.models.hotel import Room
    from app.models.negotiation import Negotiation
    from app.models.user import User


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Booking(Base):
    """Stay reservation of a room by a guest.

    Dates are inclusive on both ends. Bookings are never deleted;
    CANCELLED frees the dates.
    """

    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("negotiation_id", name="uq_bookings_negotiation_id"),
        UniqueConstraint("payment_session_id", name="uq_bookings_payment_session_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("rooms.id"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    # Set when the booking materializes an accepted negotiation
    negotiation_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("negotiations.id")
    )

    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)  # total charged
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, name="booking_status", native_enum=False, length=20),
        default=BookingStatus.PENDING,
        nullable=False,
        index=True,
    )
    payment_session_id: Mapped[str | None] = mapped_column(String(255))

    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    room: Mapped["Room"] = relationship("Room", back_populates="bookings")
    guest: Mapped["User"] = relationship("User", back_populates="bookings")
    negotiation: Mapped["Negotiation | None"] = relationship(
        "Negotiation", back_populates="booking"
    )


# No two non-cancelled bookings of a room may share a date
Booking.__table__.append_constraint(
    ExcludeConstraint(
        (Booking.__table__.c.room_id, "="),
        (
            func.daterange(
                Booking.__table__.c.start_date,
                Booking.__table__.c.end_date,
                text("'[]'"),
            ),
            "&&",
        ),
        name="ex_bookings_room_dates",
        using="gist",
        where=text(f"status <> '{BookingStatus.CANCELLED.value}'"),
    )
)
