"""
Expiry sweep: moves lapsed ACTIVE reservations to COMPLETED.

A reservation is lapsed when
  (a) its date is before today, or
  (b) its date is yesterday and it has neither start nor end time
      (an all-day booking).

(b) is implied by (a); it stays in the WHERE clause so the all-day rule
is visible in the query.

The update is a single `UPDATE ... WHERE status = 'ACTIVE' AND <date rule>`.
It only ever moves rows forward, so concurrent or repeated runs are safe
and a second run with no newly expired rows updates nothing.

Callers invoke it explicitly before reading reservations; there is no
hidden interception on queries.
"""

import asyncio
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import and_, or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from deskbook.models.reservation import Reservation, ReservationStatus
from deskbook.core.metrics import record_sweep
from deskbook.core.logging import get_logger

logger = get_logger(__name__)


async def sweep_expired_reservations(
    db: AsyncSession,
    today: Optional[date] = None,
    trigger: str = "read",
) -> int:
    """Mark lapsed ACTIVE reservations COMPLETED and return the row count."""
    today = today or date.today()
    yesterday = today - timedelta(days=1)

    result = await db.execute(
        update(Reservation)
        .where(
            Reservation.status == ReservationStatus.ACTIVE,
            or_(
                Reservation.date < today,
                and_(
                    Reservation.date == yesterday,
                    Reservation.start_time.is_(None),
                    Reservation.end_time.is_(None),
                ),
            ),
        )
        .values(status=ReservationStatus.COMPLETED)
        .execution_options(synchronize_session="fetch")
    )
    updated = result.rowcount or 0

    record_sweep(trigger, updated)
    if updated:
        logger.info("reservations_swept", updated=updated, today=today.isoformat(), trigger=trigger)
    return updated


async def run_sweep_loop(session_factory: async_sessionmaker, interval_seconds: int) -> None:
    """
    Sweep on a fixed interval until cancelled. A failed run is logged and
    picked up again on the next tick.
    """
    logger.info("sweep_loop_started", interval_seconds=interval_seconds)
    while True:
        try:
            async with session_factory() as session:
                async with session.begin():
                    await sweep_expired_reservations(session, trigger="interval")
        except SQLAlchemyError as e:
            logger.error("sweep_failed", error=str(e))
        await asyncio.sleep(interval_seconds)
