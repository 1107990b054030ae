"""
Seat map and seat inventory endpoints.
Reads are public; writes require an admin.
"""

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.api.deps import require_admin
from deskbook.db.session import get_db
from deskbook.models.user import User
from deskbook.schemas.common import ApiResponse, ok
from deskbook.schemas.seat import SeatCreate, SeatUpdate, SeatResponse, SeatAvailability, SeatDetail
from deskbook.services import seat_service

router = APIRouter(prefix="/seats", tags=["Seats"])


@router.get("/", response_model=ApiResponse[list[SeatAvailability]])
async def list_seats(
    date: Optional[dt.date] = Query(None, description="Day to check, defaults to today"),
    location: Optional[str] = Query(None),
    has_monitor: Optional[bool] = Query(None),
    available: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Active seats with their availability for the requested day."""
    seats = await seat_service.list_seat_availability(
        db,
        on_date=date,
        location=location,
        has_monitor=has_monitor,
        available=available,
    )
    return ok(seats)


@router.get("/{seat_id}", response_model=ApiResponse[SeatDetail])
async def get_seat(seat_id: int, db: AsyncSession = Depends(get_db)):
    seat = await seat_service.get_seat(db, seat_id)
    return ok(seat)


@router.post("/", response_model=ApiResponse[SeatResponse], status_code=status.HTTP_201_CREATED)
async def create_seat(
    seat_data: SeatCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    seat = await seat_service.create_seat(db, seat_data)
    return ok(SeatResponse.model_validate(seat), "Seat created successfully")


@router.put("/{seat_id}", response_model=ApiResponse[SeatResponse])
async def update_seat(
    seat_id: int,
    patch: SeatUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    seat = await seat_service.update_seat(db, seat_id, patch)
    return ok(SeatResponse.model_validate(seat), "Seat updated successfully")


@router.delete("/{seat_id}", response_model=ApiResponse[SeatResponse])
async def delete_seat(
    seat_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete: the seat is deactivated, never removed."""
    seat = await seat_service.deactivate_seat(db, seat_id)
    return ok(SeatResponse.model_validate(seat), "Seat deleted successfully")
