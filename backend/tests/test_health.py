"""
Tests for the health, root and metrics endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_root_points_at_docs(client: AsyncClient):
    response = await client.get("/")
    assert response.json()["docs"] == "/docs"


@pytest.mark.asyncio
async def test_metrics_exposes_reservation_counters(client: AsyncClient, auth_headers, seat_a1, tomorrow):
    await client.post(
        "/api/v1/reservations/",
        json={"seat_id": seat_a1.id, "date": tomorrow.isoformat()},
        headers=auth_headers,
    )

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert 'reservation_attempts_total{outcome="success"}' in response.text
    assert "http_request_latency_seconds" in response.text


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client: AsyncClient):
    response = await client.get("/api/v1/nowhere")
    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    assert response.headers["X-Response-Time"].endswith("ms")
