"""
Seed the database with an admin, a few users, the seat map and sample bookings.

Run after migrations:
    alembic upgrade head
    python -m deskbook.seed

Existing emails and seat numbers are skipped, so it is safe to re-run.
"""

import asyncio
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.core.exceptions import AppError
from deskbook.core.logging import setup_logging, get_logger
from deskbook.core.security import hash_password
from deskbook.db.session import AsyncSessionLocal, engine
from deskbook.models import Seat, User, UserRole
from deskbook.schemas.reservation import ReservationCreate
from deskbook.services.reservation_service import create_reservation

logger = get_logger(__name__)

ADMIN = ("Admin User", "admin@company.com", "admin123")
USERS = [
    ("John Doe", "john@company.com", "password123"),
    ("Jane Smith", "jane@company.com", "password123"),
    ("Mike Johnson", "mike@company.com", "password123"),
    ("Sarah Wilson", "sarah@company.com", "password123"),
]

SEAT_MAP = {
    "Floor 1 - Open Space": [("A1", True), ("A2", True), ("A3", False), ("A4", True), ("A5", False), ("A6", True)],
    "Floor 1 - Quiet Zone": [("B1", True), ("B2", True), ("B3", False), ("B4", True)],
    "Floor 2 - Collaboration Area": [("C1", False), ("C2", True), ("C3", False), ("C4", True), ("C5", False)],
    "Floor 2 - Window Side": [("D1", True), ("D2", True), ("D3", True), ("D4", False)],
    "Floor 3 - Executive Area": [("E1", True), ("E2", True), ("E3", True)],
}

# (user email, seat number, days from today, start, end, notes)
SAMPLE_BOOKINGS = [
    ("john@company.com", "A1", 0, "09:00", "17:00", "Working on the new project"),
    ("jane@company.com", "A6", 0, "10:00", "16:00", "Client calls scheduled"),
    ("john@company.com", "A2", 1, "08:30", "17:30", "Early start for presentation prep"),
    ("mike@company.com", "C1", 1, "09:00", "17:00", "Team collaboration day"),
    ("sarah@company.com", "D1", 2, "09:00", "17:00", "Need the window view for video calls"),
]


async def _ensure_user(db: AsyncSession, name: str, email: str, password: str, role: UserRole) -> User:
    user = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if user is None:
        user = User(name=name, email=email, hashed_password=hash_password(password), role=role)
        db.add(user)
        await db.flush()
        logger.info("seed_user_created", email=email, role=role.value)
    return user


async def _ensure_seat(db: AsyncSession, seat_number: str, location: str, has_monitor: bool) -> Seat:
    seat = (await db.execute(select(Seat).where(Seat.seat_number == seat_number))).scalar_one_or_none()
    if seat is None:
        seat = Seat(
            seat_number=seat_number,
            location=location,
            has_monitor=has_monitor,
            description=f"{location} - Seat {seat_number}",
            is_active=True,
        )
        db.add(seat)
        await db.flush()
        logger.info("seed_seat_created", seat_number=seat_number)
    return seat


async def seed(db: AsyncSession) -> None:
    # ids survive the rollbacks below; ORM instances would be expired
    user_ids = {}
    name, email, password = ADMIN
    user_ids[email] = (await _ensure_user(db, name, email, password, UserRole.ADMIN)).id
    for name, email, password in USERS:
        user_ids[email] = (await _ensure_user(db, name, email, password, UserRole.USER)).id

    seat_ids = {}
    for location, entries in SEAT_MAP.items():
        for seat_number, has_monitor in entries:
            seat_ids[seat_number] = (await _ensure_seat(db, seat_number, location, has_monitor)).id
    await db.commit()

    today = date.today()
    for email, seat_number, offset, start, end, notes in SAMPLE_BOOKINGS:
        data = ReservationCreate(
            seat_id=seat_ids[seat_number],
            date=today + timedelta(days=offset),
            start_time=start,
            end_time=end,
            notes=notes,
        )
        try:
            user = await db.get(User, user_ids[email])
            await create_reservation(db, user, data)
            await db.commit()
        except AppError as e:
            await db.rollback()
            logger.info("seed_reservation_skipped", seat_number=seat_number, reason=e.message)


async def main() -> None:
    setup_logging()
    async with AsyncSessionLocal() as session:
        await seed(session)
    await engine.dispose()
    logger.info("seed_completed")


if __name__ == "__main__":
    asyncio.run(main())
