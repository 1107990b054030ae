"""
Admin dashboard endpoints: statistics, seat overview and user list.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.api.deps import require_admin
from deskbook.db.session import get_db
from deskbook.models.user import User, UserRole
from deskbook.schemas.common import ApiResponse, ok
from deskbook.schemas.seat import AdminSeatView
from deskbook.schemas.stats import StatsResponse
from deskbook.schemas.user import AdminUserResponse
from deskbook.services import seat_service, stats_service, user_service

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=ApiResponse[StatsResponse])
async def get_stats(db: AsyncSession = Depends(get_db)):
    """Occupancy for today, the weekly trend and the most booked seats."""
    return ok(await stats_service.get_stats(db))


@router.get("/seats", response_model=ApiResponse[list[AdminSeatView]])
async def list_seats(db: AsyncSession = Depends(get_db)):
    return ok(await seat_service.list_admin_seats(db))


@router.get("/users", response_model=ApiResponse[list[AdminUserResponse]])
async def list_users(
    role: Optional[UserRole] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    return ok(await user_service.list_users(db, role=role, search=search))
