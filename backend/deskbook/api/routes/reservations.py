"""
Reservation endpoints. Every read runs the expiry sweep first.
"""

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.api.deps import get_current_user
from deskbook.db.session import get_db
from deskbook.models.reservation import ReservationStatus
from deskbook.models.user import User
from deskbook.schemas.common import ApiResponse, ok
from deskbook.schemas.reservation import (
    ReservationCreate,
    ReservationUpdate,
    ReservationResponse,
    ReservationFilters,
)
from deskbook.services import reservation_service

router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.get("/", response_model=ApiResponse[list[ReservationResponse]])
async def list_reservations(
    user_id: Optional[int] = Query(None, description="Admins only"),
    seat_id: Optional[int] = Query(None),
    status: Optional[ReservationStatus] = Query(None),
    date: Optional[dt.date] = Query(None),
    start_date: Optional[dt.date] = Query(None),
    end_date: Optional[dt.date] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    filters = ReservationFilters(
        user_id=user_id,
        seat_id=seat_id,
        status=status,
        date=date,
        start_date=start_date,
        end_date=end_date,
    )
    reservations = await reservation_service.list_reservations(db, current_user, filters)
    return ok([ReservationResponse.model_validate(r) for r in reservations])


@router.post("/", response_model=ApiResponse[ReservationResponse], status_code=status.HTTP_201_CREATED)
async def create_reservation(
    data: ReservationCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Reserve a seat for one day.

    409 if the seat is taken that day or the caller already holds a seat
    that day, 404 for unknown or inactive seats, 400 for past dates.
    """
    reservation = await reservation_service.create_reservation(db, current_user, data)
    return ok(ReservationResponse.model_validate(reservation), "Reservation created successfully")


@router.get("/{reservation_id}", response_model=ApiResponse[ReservationResponse])
async def get_reservation(
    reservation_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    reservation = await reservation_service.get_reservation(db, reservation_id, current_user)
    return ok(ReservationResponse.model_validate(reservation))


@router.put("/{reservation_id}", response_model=ApiResponse[ReservationResponse])
async def update_reservation(
    reservation_id: int,
    patch: ReservationUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    reservation = await reservation_service.update_reservation(db, reservation_id, patch, current_user)
    return ok(ReservationResponse.model_validate(reservation), "Reservation updated successfully")


@router.delete("/{reservation_id}", response_model=ApiResponse[ReservationResponse])
async def cancel_reservation(
    reservation_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a reservation. The record is kept with status CANCELLED."""
    reservation = await reservation_service.cancel_reservation(db, reservation_id, current_user)
    return ok(ReservationResponse.model_validate(reservation), "Reservation cancelled successfully")
