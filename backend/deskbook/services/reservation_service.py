"""
Reservation rule engine: create, update, cancel and read reservations.

BOOKING RULES
=============

Create(seat, date, user):
  1. Seat must exist and be active                      -> NotFound
  2. No ACTIVE reservation on (seat, date)              -> Conflict
  3. User holds no ACTIVE reservation on that date      -> Conflict
  4. Date is today or later                             -> InvalidInput

Update(reservation, patch, requester):
  - owner or admin only                                 -> Forbidden
  - date of a past reservation cannot be moved          -> InvalidInput
  - a moved reservation re-runs the seat and user checks, excluding itself

Cancel(reservation, requester):
  - owner or admin only, ACTIVE only, not in the past   -> InvalidInput

CONCURRENCY
===========

The pre-checks above are advisory. Two requests racing for the same seat
can both pass them; the partial unique indexes on (seat_id, date) and
(user_id, date) restricted to ACTIVE rows decide the winner. The loser's
IntegrityError is rolled back and reported as a Conflict, the same answer
the pre-check would have given.
"""

from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from deskbook.models.reservation import Reservation, ReservationStatus
from deskbook.models.seat import Seat
from deskbook.models.user import User
from deskbook.schemas.reservation import ReservationCreate, ReservationUpdate, ReservationFilters
from deskbook.services.sweep_service import sweep_expired_reservations
from deskbook.core.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from deskbook.core.metrics import record_reservation_attempt, reservation_cancellations
from deskbook.core.logging import get_logger

logger = get_logger(__name__)

SEAT_TAKEN_MESSAGE = "Seat is already reserved for this date"
USER_BUSY_MESSAGE = "You already have a reservation for this date"


def _with_relations(query):
    return query.options(selectinload(Reservation.seat), selectinload(Reservation.user))


async def _load_reservation(db: AsyncSession, reservation_id: int) -> Optional[Reservation]:
    """Fetch a reservation with seat and user, refreshing any cached copy."""
    result = await db.execute(
        _with_relations(select(Reservation))
        .where(Reservation.id == reservation_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _find_active_on_seat(
    db: AsyncSession,
    seat_id: int,
    on_date: date,
    exclude_id: Optional[int] = None,
) -> Optional[Reservation]:
    query = select(Reservation).where(
        Reservation.seat_id == seat_id,
        Reservation.date == on_date,
        Reservation.status == ReservationStatus.ACTIVE,
    )
    if exclude_id is not None:
        query = query.where(Reservation.id != exclude_id)
    return (await db.execute(query.limit(1))).scalar_one_or_none()


async def _find_active_for_user(
    db: AsyncSession,
    user_id: int,
    on_date: date,
    exclude_id: Optional[int] = None,
) -> Optional[Reservation]:
    query = select(Reservation).where(
        Reservation.user_id == user_id,
        Reservation.date == on_date,
        Reservation.status == ReservationStatus.ACTIVE,
    )
    if exclude_id is not None:
        query = query.where(Reservation.id != exclude_id)
    return (await db.execute(query.limit(1))).scalar_one_or_none()


def _check_access(reservation: Reservation, requester: User) -> None:
    if not requester.is_admin and reservation.user_id != requester.id:
        logger.warning(
            "reservation_access_denied",
            reservation_id=reservation.id,
            requester_id=requester.id,
        )
        raise ForbiddenError("You do not have access to this reservation")


async def _get_owned_reservation(db: AsyncSession, reservation_id: int, requester: User) -> Reservation:
    result = await db.execute(select(Reservation).where(Reservation.id == reservation_id))
    reservation = result.scalar_one_or_none()
    if not reservation:
        raise NotFoundError("Reservation not found")
    _check_access(reservation, requester)
    return reservation


def _conflict_message(exc: IntegrityError) -> str:
    """Map a violated unique index back to the booking rule it enforces."""
    # PostgreSQL names the index, SQLite lists its columns
    detail = str(exc.orig)
    if "uq_reservations_user_date_active" in detail or "reservations.user_id" in detail:
        return USER_BUSY_MESSAGE
    return SEAT_TAKEN_MESSAGE


async def _flush_or_conflict(db: AsyncSession, **context) -> None:
    """Flush pending writes; a unique-index violation becomes a Conflict."""
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        message = _conflict_message(e)
        logger.warning("reservation_conflict", reason="unique_violation", rule=message, **context)
        raise ConflictError(message)


async def create_reservation(
    db: AsyncSession,
    user: User,
    data: ReservationCreate,
    today: Optional[date] = None,
) -> Reservation:
    today = today or date.today()
    user_id = user.id

    result = await db.execute(select(Seat).where(Seat.id == data.seat_id))
    seat = result.scalar_one_or_none()
    if not seat or not seat.is_active:
        record_reservation_attempt("not_found")
        raise NotFoundError("Seat not found or inactive")

    if await _find_active_on_seat(db, data.seat_id, data.date):
        record_reservation_attempt("conflict")
        logger.info("reservation_conflict", reason="seat_taken", seat_id=data.seat_id, date=str(data.date))
        raise ConflictError(SEAT_TAKEN_MESSAGE)

    if await _find_active_for_user(db, user_id, data.date):
        record_reservation_attempt("conflict")
        logger.info("reservation_conflict", reason="user_busy", user_id=user_id, date=str(data.date))
        raise ConflictError(USER_BUSY_MESSAGE)

    if data.date < today:
        record_reservation_attempt("invalid")
        raise InvalidInputError("Cannot reserve seats for past dates")

    reservation = Reservation(
        user_id=user_id,
        seat_id=data.seat_id,
        date=data.date,
        start_time=data.start_time,
        end_time=data.end_time,
        notes=data.notes,
        status=ReservationStatus.ACTIVE,
    )
    db.add(reservation)
    try:
        await _flush_or_conflict(db, seat_id=data.seat_id, user_id=user_id, date=str(data.date))
    except ConflictError:
        record_reservation_attempt("conflict")
        raise

    record_reservation_attempt("success")
    logger.info(
        "reservation_created",
        reservation_id=reservation.id,
        user_id=user_id,
        seat_id=data.seat_id,
        date=str(data.date),
    )
    return await _load_reservation(db, reservation.id)


async def update_reservation(
    db: AsyncSession,
    reservation_id: int,
    patch: ReservationUpdate,
    requester: User,
    today: Optional[date] = None,
) -> Reservation:
    today = today or date.today()
    reservation = await _get_owned_reservation(db, reservation_id, requester)
    changes = patch.model_dump(exclude_unset=True)

    start = changes.get("start_time", reservation.start_time)
    end = changes.get("end_time", reservation.end_time)
    if start and end and end <= start:
        raise InvalidInputError("end_time must be after start_time")

    new_date = changes.get("date")
    if new_date is not None and new_date != reservation.date:
        if reservation.date < today:
            raise InvalidInputError("Cannot modify past reservations")
        if new_date < today:
            raise InvalidInputError("Cannot move a reservation to a past date")
        if reservation.status == ReservationStatus.ACTIVE:
            if await _find_active_on_seat(db, reservation.seat_id, new_date, exclude_id=reservation.id):
                raise ConflictError("Seat is already reserved for the new date")
            if await _find_active_for_user(db, reservation.user_id, new_date, exclude_id=reservation.id):
                raise ConflictError(USER_BUSY_MESSAGE)

    for field, value in changes.items():
        setattr(reservation, field, value)

    await _flush_or_conflict(db, reservation_id=reservation_id, date=str(new_date))

    logger.info(
        "reservation_updated",
        reservation_id=reservation_id,
        requester_id=requester.id,
        fields=sorted(changes),
    )
    return await _load_reservation(db, reservation_id)


async def cancel_reservation(
    db: AsyncSession,
    reservation_id: int,
    requester: User,
    today: Optional[date] = None,
) -> Reservation:
    """Cancel a present or future ACTIVE reservation. The row is kept."""
    today = today or date.today()
    reservation = await _get_owned_reservation(db, reservation_id, requester)

    if reservation.date < today:
        raise InvalidInputError("Cannot cancel past reservations")

    if reservation.status != ReservationStatus.ACTIVE:
        raise InvalidInputError(f"Reservation is already {reservation.status.value.lower()}")

    reservation.status = ReservationStatus.CANCELLED
    await db.flush()

    reservation_cancellations.inc()
    logger.info(
        "reservation_cancelled",
        reservation_id=reservation_id,
        requester_id=requester.id,
        seat_id=reservation.seat_id,
        date=str(reservation.date),
    )
    return await _load_reservation(db, reservation_id)


async def get_reservation(db: AsyncSession, reservation_id: int, requester: User) -> Reservation:
    await sweep_expired_reservations(db)

    reservation = await _load_reservation(db, reservation_id)
    if not reservation:
        raise NotFoundError("Reservation not found")
    _check_access(reservation, requester)
    return reservation


async def list_reservations(
    db: AsyncSession,
    requester: User,
    filters: ReservationFilters,
) -> list[Reservation]:
    """
    List reservations, newest date first.
    Non-admins only ever see their own; admins may filter by user_id.
    A single `date` takes precedence over the start/end range.
    """
    await sweep_expired_reservations(db)

    query = _with_relations(select(Reservation))

    if not requester.is_admin:
        query = query.where(Reservation.user_id == requester.id)
    elif filters.user_id is not None:
        query = query.where(Reservation.user_id == filters.user_id)

    if filters.seat_id is not None:
        query = query.where(Reservation.seat_id == filters.seat_id)
    if filters.status is not None:
        query = query.where(Reservation.status == filters.status)

    if filters.date is not None:
        query = query.where(Reservation.date == filters.date)
    else:
        if filters.start_date is not None:
            query = query.where(Reservation.date >= filters.start_date)
        if filters.end_date is not None:
            query = query.where(Reservation.date <= filters.end_date)

    result = await db.execute(
        query.order_by(Reservation.date.desc(), Reservation.id.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
