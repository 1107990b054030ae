"""
Request-scoped dependencies: the authenticated principal and role gates.
"""

import secrets
from typing import Optional

from fastapi import Depends, Header
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.core.config import get_settings
from deskbook.core.exceptions import ForbiddenError, UnauthorizedError
from deskbook.core.logging import bind_user
from deskbook.core.security import decode_access_token
from deskbook.db.session import get_db
from deskbook.models.user import User
from deskbook.services.user_service import get_user

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    if not token:
        raise UnauthorizedError("Unauthorized")

    payload = decode_access_token(token)
    if payload is None or "sub" not in payload:
        raise UnauthorizedError("Could not validate credentials")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedError("Could not validate credentials")

    user = await get_user(db, user_id)
    if user is None:
        raise UnauthorizedError("Could not validate credentials")
    bind_user(user.id, user.role.value)
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise ForbiddenError("Admin access required")
    return current_user


async def verify_cron_secret(x_cron_secret: Optional[str] = Header(None)) -> None:
    """Shared-secret gate for the scheduled sweep trigger."""
    expected = get_settings().CRON_SECRET
    if not expected or not x_cron_secret or not secrets.compare_digest(x_cron_secret, expected):
        raise UnauthorizedError("Unauthorized")
