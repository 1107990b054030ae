"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh in-memory SQLite schema; the API's DB dependency is
overridden to share the test session so fixtures and requests see the
same data.
"""

from datetime import date, timedelta
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from deskbook.main import app
from deskbook.db.base import Base
from deskbook.db.session import get_db
from deskbook.core.security import create_access_token, hash_password
from deskbook.models import Reservation, ReservationStatus, Seat, User, UserRole

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop everything for isolation."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db: AsyncSession, name: str, email: str, role: UserRole = UserRole.USER) -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password("testpassword123"),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def _headers_for(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Test User", "test@example.com")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Other User", "other@example.com")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Admin User", "admin@example.com", UserRole.ADMIN)


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    return _headers_for(test_user)


@pytest_asyncio.fixture
async def other_headers(other_user: User) -> dict:
    return _headers_for(other_user)


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict:
    return _headers_for(admin_user)


@pytest_asyncio.fixture
async def make_seat(db_session: AsyncSession):
    async def _make_seat(
        seat_number: str,
        location: str = "Floor 1 - Open Space",
        has_monitor: bool = True,
        is_active: bool = True,
    ) -> Seat:
        seat = Seat(
            seat_number=seat_number,
            location=location,
            has_monitor=has_monitor,
            description=f"{location} - Seat {seat_number}",
            is_active=is_active,
        )
        db_session.add(seat)
        await db_session.commit()
        await db_session.refresh(seat)
        return seat

    return _make_seat


@pytest_asyncio.fixture
async def make_reservation(db_session: AsyncSession):
    """Insert a reservation directly, bypassing the booking rules."""

    async def _make_reservation(
        user: User,
        seat: Seat,
        day: date,
        status: ReservationStatus = ReservationStatus.ACTIVE,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> Reservation:
        reservation = Reservation(
            user_id=user.id,
            seat_id=seat.id,
            date=day,
            start_time=start_time,
            end_time=end_time,
            status=status,
        )
        db_session.add(reservation)
        await db_session.commit()
        await db_session.refresh(reservation)
        return reservation

    return _make_reservation


@pytest_asyncio.fixture
async def seat_a1(make_seat) -> Seat:
    return await make_seat("A1")


@pytest_asyncio.fixture
async def seat_b1(make_seat) -> Seat:
    return await make_seat("B1", location="Floor 1 - Quiet Zone", has_monitor=False)


@pytest.fixture
def today() -> date:
    return date.today()


@pytest.fixture
def tomorrow(today: date) -> date:
    return today + timedelta(days=1)


@pytest.fixture
def yesterday(today: date) -> date:
    return today - timedelta(days=1)
