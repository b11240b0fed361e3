"""Negotiation database model."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Numeric
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.domain.negotiation_state import NegotiationStatus

if TYPE_CHECKING:
    from app.models.booking import Booking
    from app.models.hotel import Room
    from app.models.user import User


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Negotiation(Base):
    """Price offer from a guest on a room for a date range."""

    __tablename__ = "negotiations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    room_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("rooms.id"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )

    # Guest offer, overwritten by a manager counter-offer
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    status: Mapped[NegotiationStatus] = mapped_column(
        Enum(
            NegotiationStatus,
            name="negotiation_status",
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=NegotiationStatus.PENDING,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    room: Mapped["Room"] = relationship("Room", back_populates="negotiations")
    guest: Mapped["User"] = relationship("User", back_populates="negotiations")
    booking: Mapped["Booking | None"] = relationship(
        "Booking", back_populates="negotiation", uselist=False
    )
