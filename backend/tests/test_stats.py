"""
Tests for the admin statistics dashboard.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from deskbook.core.security import hash_password
from deskbook.models import ReservationStatus, User
from deskbook.services.stats_service import get_stats, occupancy_rate


async def _make_users(db_session, count: int) -> list[User]:
    users = [
        User(
            name=f"Staff {i}",
            email=f"staff{i}@example.com",
            hashed_password=hash_password("testpassword123"),
        )
        for i in range(count)
    ]
    db_session.add_all(users)
    await db_session.commit()
    return users


@pytest.mark.parametrize(
    "booked,total,expected",
    [(0, 10, 0), (3, 10, 30), (1, 3, 33), (2, 3, 67), (1, 8, 13), (5, 5, 100), (4, 0, 0)],
)
def test_occupancy_rate_rounding(booked, total, expected):
    assert occupancy_rate(booked, total) == expected


@pytest.mark.asyncio
async def test_stats_occupancy_for_today(db_session, make_seat, make_reservation, today):
    seats = [await make_seat(f"S{i:02d}") for i in range(10)]
    users = await _make_users(db_session, 4)
    for user, seat in zip(users[:3], seats):
        await make_reservation(user, seat, today)
    await make_reservation(users[3], seats[3], today, status=ReservationStatus.CANCELLED)

    stats = await get_stats(db_session, today=today)

    assert stats["total_seats"] == 10
    assert stats["total_users"] == 4
    assert stats["total_reservations"] == 4
    assert stats["today_reservations"] == 3
    assert stats["occupancy_rate"] == 30


@pytest.mark.asyncio
async def test_stats_ignore_inactive_seats(db_session, make_seat, today):
    await make_seat("A1")
    await make_seat("A2", is_active=False)

    stats = await get_stats(db_session, today=today)
    assert stats["total_seats"] == 1
    assert stats["occupancy_rate"] == 0


@pytest.mark.asyncio
async def test_weekly_trend_window(db_session, make_seat, make_reservation, today):
    seat = await make_seat("A1")
    other = await make_seat("A2")
    users = await _make_users(db_session, 2)

    await make_reservation(users[0], seat, today)
    await make_reservation(users[1], other, today)
    await make_reservation(users[0], seat, today - timedelta(days=3))
    await make_reservation(users[0], seat, today - timedelta(days=7))
    await make_reservation(users[0], seat, today - timedelta(days=8))
    await make_reservation(users[0], seat, today + timedelta(days=1))

    stats = await get_stats(db_session, today=today)

    assert stats["weekly_trend"] == [
        {"date": today - timedelta(days=7), "reservations": 1},
        {"date": today - timedelta(days=3), "reservations": 1},
        {"date": today, "reservations": 2},
    ]


@pytest.mark.asyncio
async def test_popular_seats_top_five(db_session, make_seat, make_reservation, today):
    seats = [await make_seat(f"P{i}") for i in range(7)]
    users = iter(await _make_users(db_session, 10))

    for day in range(3):
        await make_reservation(next(users), seats[0], today - timedelta(days=day))
    for day in range(2):
        await make_reservation(next(users), seats[1], today - timedelta(days=day))
    for seat in seats[2:]:
        await make_reservation(next(users), seat, today)

    stats = await get_stats(db_session, today=today)
    popular = stats["popular_locations"]

    assert [p["seat_number"] for p in popular] == ["P0", "P1", "P2", "P3", "P4"]
    assert [p["reservations"] for p in popular] == [3, 2, 1, 1, 1]


@pytest.mark.asyncio
async def test_stats_endpoint(
    client: AsyncClient, admin_headers, test_user, seat_a1, make_reservation, today
):
    await make_reservation(test_user, seat_a1, today)

    response = await client.get("/api/v1/admin/stats", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_seats"] == 1
    assert data["occupancy_rate"] == 100
    assert data["weekly_trend"] == [{"date": today.isoformat(), "reservations": 1}]
    assert data["popular_locations"][0]["seat_number"] == "A1"


@pytest.mark.asyncio
async def test_stats_endpoint_requires_admin(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/admin/stats", headers=auth_headers)
    assert response.status_code == 403
    assert response.json()["error"] == "Admin access required"


@pytest.mark.asyncio
async def test_stats_endpoint_requires_login(client: AsyncClient):
    response = await client.get("/api/v1/admin/stats")
    assert response.status_code == 401
