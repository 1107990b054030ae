"""
Reservation model: one user holding one seat for one calendar day.

Key design decisions:
- Partial unique index on (seat_id, date) WHERE status = 'ACTIVE' is the
  real guard against double booking. Cancelled and completed rows stay in
  the table without blocking the seat for that day.
- Partial unique index on (user_id, date) WHERE status = 'ACTIVE' backs the
  one-desk-per-person-per-day rule at the database level as well.
- Status changes replace deletes, so history is preserved.
"""

import enum

from sqlalchemy import Column, Integer, String, Date, Enum, ForeignKey, Index, text
from sqlalchemy.orm import relationship

from deskbook.db.base import Base, TimestampMixin


class ReservationStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


_ACTIVE_ONLY = text("status = 'ACTIVE'")


class Reservation(Base, TimestampMixin):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    seat_id = Column(Integer, ForeignKey("seats.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=True)  # "HH:MM"
    end_time = Column(String(5), nullable=True)
    notes = Column(String(500), nullable=True)
    status = Column(
        Enum(
            ReservationStatus,
            native_enum=False,
            length=20,
            create_constraint=True,
            name="reservation_status",
        ),
        nullable=False,
        default=ReservationStatus.ACTIVE,
    )

    user = relationship("User", back_populates="reservations", lazy="raise")
    seat = relationship("Seat", back_populates="reservations", lazy="raise")

    __table_args__ = (
        Index(
            "uq_reservations_seat_date_active",
            "seat_id",
            "date",
            unique=True,
            postgresql_where=_ACTIVE_ONLY,
            sqlite_where=_ACTIVE_ONLY,
        ),
        Index(
            "uq_reservations_user_date_active",
            "user_id",
            "date",
            unique=True,
            postgresql_where=_ACTIVE_ONLY,
            sqlite_where=_ACTIVE_ONLY,
        ),
        # Sweep and stats both scan by (status, date)
        Index("ix_reservations_status_date", "status", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, seat={self.seat_id}, user={self.user_id}, "
            f"date={self.date}, status={self.status})>"
        )
