"""
Seat model: one bookable desk.

Seats are soft-deleted through `is_active`; rows referenced by
reservations are never removed, so every listing filters on the flag.
"""

from sqlalchemy import Column, Integer, String, Boolean, Index
from sqlalchemy.orm import relationship

from deskbook.db.base import Base, TimestampMixin


class Seat(Base, TimestampMixin):
    __tablename__ = "seats"

    id = Column(Integer, primary_key=True, index=True)
    seat_number = Column(String(20), unique=True, index=True, nullable=False)
    location = Column(String(255), nullable=False)
    has_monitor = Column(Boolean, nullable=False, default=False)
    description = Column(String(1000), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    reservations = relationship("Reservation", back_populates="seat", lazy="raise")

    __table_args__ = (
        # Seat map queries filter by location among active seats
        Index("ix_seats_active_location", "is_active", "location"),
    )

    def __repr__(self) -> str:
        return f"<Seat(id={self.id}, number={self.seat_number}, active={self.is_active})>"
