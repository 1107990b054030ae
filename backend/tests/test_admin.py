"""
Tests for the admin seat overview and user list.
"""

import pytest
from httpx import AsyncClient

from deskbook.models import ReservationStatus


@pytest.mark.asyncio
async def test_admin_seat_overview(
    client: AsyncClient,
    admin_headers,
    test_user,
    other_user,
    seat_a1,
    seat_b1,
    make_seat,
    make_reservation,
    today,
    tomorrow,
):
    await make_seat("Z9", is_active=False)
    await make_reservation(test_user, seat_a1, today)
    await make_reservation(other_user, seat_a1, tomorrow)
    await make_reservation(other_user, seat_b1, today, status=ReservationStatus.CANCELLED)

    response = await client.get("/api/v1/admin/seats", headers=admin_headers)
    assert response.status_code == 200
    seats = {s["seat_number"]: s for s in response.json()["data"]}

    assert set(seats) == {"A1", "B1"}
    assert seats["A1"]["current_reservation"]["user"]["email"] == "test@example.com"
    assert seats["A1"]["total_reservations"] == 2
    assert seats["B1"]["current_reservation"] is None
    assert seats["B1"]["total_reservations"] == 0


@pytest.mark.asyncio
async def test_admin_seat_overview_sweeps_expired(
    client: AsyncClient, admin_headers, test_user, seat_a1, make_reservation, yesterday
):
    await make_reservation(test_user, seat_a1, yesterday)

    response = await client.get("/api/v1/admin/seats", headers=admin_headers)
    assert response.json()["data"][0]["total_reservations"] == 0


@pytest.mark.asyncio
async def test_admin_user_list_counts(
    client: AsyncClient,
    admin_headers,
    test_user,
    other_user,
    seat_a1,
    seat_b1,
    make_reservation,
    today,
    tomorrow,
):
    await make_reservation(test_user, seat_a1, today)
    await make_reservation(test_user, seat_a1, tomorrow, status=ReservationStatus.CANCELLED)
    await make_reservation(test_user, seat_b1, tomorrow)

    response = await client.get("/api/v1/admin/users", headers=admin_headers)
    assert response.status_code == 200
    users = {u["email"]: u for u in response.json()["data"]}

    assert set(users) == {"test@example.com", "other@example.com", "admin@example.com"}
    assert users["test@example.com"]["active_reservations"] == 2
    assert users["test@example.com"]["total_reservations"] == 3
    assert users["other@example.com"]["active_reservations"] == 0
    assert users["other@example.com"]["total_reservations"] == 0
    assert "hashed_password" not in users["test@example.com"]


@pytest.mark.asyncio
async def test_admin_user_list_newest_first(client: AsyncClient, admin_headers, test_user, other_user):
    response = await client.get("/api/v1/admin/users", headers=admin_headers)
    ids = [u["id"] for u in response.json()["data"]]
    assert ids == sorted(ids, reverse=True)


@pytest.mark.asyncio
async def test_admin_user_search_and_role(client: AsyncClient, admin_headers, test_user, other_user):
    by_name = await client.get("/api/v1/admin/users", params={"search": "OTHER"}, headers=admin_headers)
    assert [u["email"] for u in by_name.json()["data"]] == ["other@example.com"]

    by_email = await client.get("/api/v1/admin/users", params={"search": "test@"}, headers=admin_headers)
    assert [u["email"] for u in by_email.json()["data"]] == ["test@example.com"]

    admins = await client.get("/api/v1/admin/users", params={"role": "ADMIN"}, headers=admin_headers)
    assert [u["email"] for u in admins.json()["data"]] == ["admin@example.com"]


@pytest.mark.asyncio
async def test_admin_user_search_wildcards_are_literal(
    client: AsyncClient, admin_headers, test_user, other_user
):
    """% and _ in the search term match themselves, not any character."""
    for term in ("_", "%", "t_st"):
        response = await client.get("/api/v1/admin/users", params={"search": term}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_admin_user_list_requires_admin(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/admin/users", headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_user_list_bad_role(client: AsyncClient, admin_headers):
    response = await client.get("/api/v1/admin/users", params={"role": "ROOT"}, headers=admin_headers)
    assert response.status_code == 400
