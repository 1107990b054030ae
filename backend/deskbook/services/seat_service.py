"""
Seat inventory and availability queries.

A seat is available on day D when it is active and no ACTIVE reservation
holds it on D. Inactive seats never appear in availability listings.
"""

from datetime import date
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from deskbook.models.seat import Seat
from deskbook.models.reservation import Reservation, ReservationStatus
from deskbook.schemas.seat import SeatCreate, SeatUpdate
from deskbook.db.session import flush_or_conflict
from deskbook.services.sweep_service import sweep_expired_reservations
from deskbook.core.exceptions import ConflictError, NotFoundError
from deskbook.core.logging import get_logger

logger = get_logger(__name__)

SEAT_NUMBER_TAKEN_MESSAGE = "Seat with this number already exists"


async def _get_seat_or_404(db: AsyncSession, seat_id: int) -> Seat:
    result = await db.execute(select(Seat).where(Seat.id == seat_id))
    seat = result.scalar_one_or_none()
    if not seat:
        raise NotFoundError("Seat not found")
    return seat


async def _seat_number_taken(db: AsyncSession, seat_number: str) -> bool:
    result = await db.execute(select(Seat.id).where(Seat.seat_number == seat_number))
    return result.first() is not None


async def _active_reservations_by_seat(
    db: AsyncSession,
    on_date: date,
    seat_ids: list[int],
) -> dict[int, Reservation]:
    if not seat_ids:
        return {}
    result = await db.execute(
        select(Reservation)
        .options(selectinload(Reservation.user))
        .where(
            Reservation.seat_id.in_(seat_ids),
            Reservation.date == on_date,
            Reservation.status == ReservationStatus.ACTIVE,
        )
        .execution_options(populate_existing=True)
    )
    return {r.seat_id: r for r in result.scalars().all()}


async def list_seat_availability(
    db: AsyncSession,
    on_date: Optional[date] = None,
    location: Optional[str] = None,
    has_monitor: Optional[bool] = None,
    available: Optional[bool] = None,
) -> list[dict]:
    """
    Active seats ordered by seat number, each flagged with availability on
    `on_date` (today when omitted). `available` keeps only matching seats.
    """
    on_date = on_date or date.today()

    query = select(Seat).where(Seat.is_active.is_(True))
    if location:
        query = query.where(Seat.location == location)
    if has_monitor is not None:
        query = query.where(Seat.has_monitor.is_(has_monitor))

    seats = list((await db.execute(query.order_by(Seat.seat_number.asc()))).scalars().all())
    held = await _active_reservations_by_seat(db, on_date, [s.id for s in seats])

    listing = []
    for seat in seats:
        reservation = held.get(seat.id)
        entry = {
            "id": seat.id,
            "seat_number": seat.seat_number,
            "location": seat.location,
            "has_monitor": seat.has_monitor,
            "description": seat.description,
            "is_available": reservation is None,
            "reserved_by": reservation.user if reservation else None,
            "reserved_date": reservation.date if reservation else None,
        }
        if available is None or entry["is_available"] == available:
            listing.append(entry)
    return listing


async def get_seat(db: AsyncSession, seat_id: int) -> dict:
    """Seat with its ACTIVE reservations, latest date first."""
    await sweep_expired_reservations(db)

    seat = await _get_seat_or_404(db, seat_id)
    result = await db.execute(
        select(Reservation)
        .options(selectinload(Reservation.user))
        .where(Reservation.seat_id == seat_id, Reservation.status == ReservationStatus.ACTIVE)
        .order_by(Reservation.date.desc())
        .execution_options(populate_existing=True)
    )
    return {**_seat_fields(seat), "reservations": list(result.scalars().all())}


async def create_seat(db: AsyncSession, seat_data: SeatCreate) -> Seat:
    if await _seat_number_taken(db, seat_data.seat_number):
        raise ConflictError(SEAT_NUMBER_TAKEN_MESSAGE)

    seat = Seat(**seat_data.model_dump(), is_active=True)
    db.add(seat)
    await flush_or_conflict(db, SEAT_NUMBER_TAKEN_MESSAGE, seat_number=seat_data.seat_number)
    await db.refresh(seat)

    logger.info("seat_created", seat_id=seat.id, seat_number=seat.seat_number)
    return seat


async def update_seat(db: AsyncSession, seat_id: int, patch: SeatUpdate) -> Seat:
    seat = await _get_seat_or_404(db, seat_id)
    changes = patch.model_dump(exclude_unset=True)

    new_number = changes.get("seat_number")
    if new_number and new_number != seat.seat_number and await _seat_number_taken(db, new_number):
        raise ConflictError(SEAT_NUMBER_TAKEN_MESSAGE)

    for field, value in changes.items():
        setattr(seat, field, value)
    await flush_or_conflict(db, SEAT_NUMBER_TAKEN_MESSAGE, seat_id=seat_id)
    await db.refresh(seat)

    logger.info("seat_updated", seat_id=seat.id, fields=sorted(changes))
    return seat


async def deactivate_seat(db: AsyncSession, seat_id: int, today: Optional[date] = None) -> Seat:
    """
    Soft-delete a seat. Refused while it still holds ACTIVE reservations
    for today or later; past bookings keep pointing at the row.
    """
    today = today or date.today()
    seat = await _get_seat_or_404(db, seat_id)

    upcoming = await db.execute(
        select(func.count(Reservation.id)).where(
            Reservation.seat_id == seat_id,
            Reservation.status == ReservationStatus.ACTIVE,
            Reservation.date >= today,
        )
    )
    if upcoming.scalar_one() > 0:
        raise ConflictError("Cannot delete seat with active future reservations")

    seat.is_active = False
    await db.flush()
    await db.refresh(seat)

    logger.info("seat_deactivated", seat_id=seat.id, seat_number=seat.seat_number)
    return seat


async def list_admin_seats(db: AsyncSession, today: Optional[date] = None) -> list[dict]:
    """Active seats with today's booking and their total ACTIVE reservation count."""
    today = today or date.today()
    await sweep_expired_reservations(db, today=today)

    seats = list(
        (await db.execute(
            select(Seat).where(Seat.is_active.is_(True)).order_by(Seat.seat_number.asc())
        )).scalars().all()
    )
    held = await _active_reservations_by_seat(db, today, [s.id for s in seats])

    counts = dict(
        (await db.execute(
            select(Reservation.seat_id, func.count(Reservation.id))
            .where(Reservation.status == ReservationStatus.ACTIVE)
            .group_by(Reservation.seat_id)
        )).all()
    )

    return [
        {
            **_seat_fields(seat),
            "current_reservation": held.get(seat.id),
            "total_reservations": counts.get(seat.id, 0),
        }
        for seat in seats
    ]


def _seat_fields(seat: Seat) -> dict:
    return {
        "id": seat.id,
        "seat_number": seat.seat_number,
        "location": seat.location,
        "has_monitor": seat.has_monitor,
        "description": seat.description,
        "is_active": seat.is_active,
        "created_at": seat.created_at,
    }
