"""
Scheduled trigger for the expiry sweep.

The scheduler calls this with the shared secret in `X-Cron-Secret`.
A failed run is simply retried by the next scheduled call.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.api.deps import verify_cron_secret
from deskbook.db.session import get_db
from deskbook.schemas.common import ApiResponse, ok
from deskbook.schemas.stats import SweepResult
from deskbook.services.sweep_service import sweep_expired_reservations

router = APIRouter(prefix="/cron", tags=["Cron"], dependencies=[Depends(verify_cron_secret)])


@router.get("/update-reservations", response_model=ApiResponse[SweepResult])
async def update_reservations(db: AsyncSession = Depends(get_db)):
    updated = await sweep_expired_reservations(db, trigger="cron")
    return ok(SweepResult(updated_count=updated))
