"""
User queries for the admin user list.
"""

from typing import Optional

from sqlalchemy import select, func, or_, case
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.models.user import User, UserRole
from deskbook.models.reservation import Reservation, ReservationStatus


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


def _escape_like(term: str) -> str:
    """Make % and _ in user input match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def list_users(
    db: AsyncSession,
    role: Optional[UserRole] = None,
    search: Optional[str] = None,
) -> list[dict]:
    """
    List users newest first with their ACTIVE and total reservation counts.
    `search` matches name or email, case-insensitively.
    """
    active_count = func.coalesce(
        func.sum(case((Reservation.status == ReservationStatus.ACTIVE, 1), else_=0)), 0
    )
    query = (
        select(User, active_count.label("active"), func.count(Reservation.id).label("total"))
        .outerjoin(Reservation, Reservation.user_id == User.id)
        .group_by(User.id)
        .order_by(User.created_at.desc(), User.id.desc())
    )

    if role is not None:
        query = query.where(User.role == role)
    if search:
        pattern = f"%{_escape_like(search.lower())}%"
        query = query.where(
            or_(
                func.lower(User.name).like(pattern, escape="\\"),
                func.lower(User.email).like(pattern, escape="\\"),
            )
        )

    rows = (await db.execute(query)).all()
    return [
        {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role,
            "created_at": user.created_at,
            "active_reservations": int(active),
            "total_reservations": int(total),
        }
        for user, active, total in rows
    ]
