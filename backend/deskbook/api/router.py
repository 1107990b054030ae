"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from deskbook.api.routes import auth, users, seats, reservations, admin, cron
from deskbook.schemas.common import ApiError

# Every error leaves the API in the same envelope
ERROR_RESPONSES = {
    code: {"model": ApiError}
    for code in (400, 401, 403, 404, 409, 500)
}

api_router = APIRouter(prefix="/api/v1", responses=ERROR_RESPONSES)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(seats.router)
api_router.include_router(reservations.router)
api_router.include_router(admin.router)
api_router.include_router(cron.router)
