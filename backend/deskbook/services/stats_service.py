"""
Read-only aggregates for the admin dashboard.

All counts only consider ACTIVE reservations except `total_reservations`.
The trend and popularity window runs from seven days ago through today.
"""

from datetime import date, timedelta
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.models.seat import Seat
from deskbook.models.user import User
from deskbook.models.reservation import Reservation, ReservationStatus

TREND_WINDOW_DAYS = 7
POPULAR_SEATS_LIMIT = 5


def occupancy_rate(booked: int, total_seats: int) -> int:
    """Percentage of seats booked, rounded half up; 0 when there are no seats."""
    if total_seats <= 0:
        return 0
    return (200 * booked + total_seats) // (2 * total_seats)


async def _count(db: AsyncSession, query) -> int:
    return (await db.execute(query)).scalar_one()


async def weekly_trend(db: AsyncSession, today: date) -> list[dict]:
    since = today - timedelta(days=TREND_WINDOW_DAYS)
    rows = await db.execute(
        select(Reservation.date, func.count(Reservation.id))
        .where(
            Reservation.status == ReservationStatus.ACTIVE,
            Reservation.date >= since,
            Reservation.date <= today,
        )
        .group_by(Reservation.date)
        .order_by(Reservation.date.asc())
    )
    return [{"date": day, "reservations": count} for day, count in rows.all()]


async def popular_seats(db: AsyncSession, today: date) -> list[dict]:
    since = today - timedelta(days=TREND_WINDOW_DAYS)
    booked = func.count(Reservation.id).label("reservations")
    rows = await db.execute(
        select(Seat.id, Seat.seat_number, Seat.location, booked)
        .join(Reservation, Reservation.seat_id == Seat.id)
        .where(
            Reservation.status == ReservationStatus.ACTIVE,
            Reservation.date >= since,
            Reservation.date <= today,
        )
        .group_by(Seat.id, Seat.seat_number, Seat.location)
        .order_by(booked.desc(), Seat.seat_number.asc())
        .limit(POPULAR_SEATS_LIMIT)
    )
    return [
        {"seat_id": seat_id, "seat_number": number, "location": location, "reservations": count}
        for seat_id, number, location, count in rows.all()
    ]


async def get_stats(db: AsyncSession, today: Optional[date] = None) -> dict:
    today = today or date.today()

    total_seats = await _count(db, select(func.count(Seat.id)).where(Seat.is_active.is_(True)))
    total_users = await _count(db, select(func.count(User.id)))
    total_reservations = await _count(db, select(func.count(Reservation.id)))
    today_reservations = await _count(
        db,
        select(func.count(Reservation.id)).where(
            Reservation.date == today,
            Reservation.status == ReservationStatus.ACTIVE,
        ),
    )

    return {
        "total_seats": total_seats,
        "total_users": total_users,
        "total_reservations": total_reservations,
        "today_reservations": today_reservations,
        "occupancy_rate": occupancy_rate(today_reservations, total_seats),
        "weekly_trend": await weekly_trend(db, today),
        "popular_locations": await popular_seats(db, today),
    }
