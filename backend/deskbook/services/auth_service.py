"""
Authentication service handling user registration and login.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.db.session import flush_or_conflict
from deskbook.models.user import User, UserRole
from deskbook.schemas.user import UserCreate, UserLogin
from deskbook.core.security import hash_password, verify_password, create_access_token
from deskbook.core.exceptions import ConflictError, UnauthorizedError
from deskbook.core.logging import get_logger

logger = get_logger(__name__)

EMAIL_TAKEN_MESSAGE = "User already exists with this email"


async def _email_taken(db: AsyncSession, email: str) -> bool:
    result = await db.execute(select(User.id).where(User.email == email))
    return result.first() is not None


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new user with hashed password.
    Self-registration always yields a USER; admins come from the seed command.
    Raises ConflictError if the email already exists.
    """
    if await _email_taken(db, user_data.email):
        logger.warning("registration_failed", reason="email_exists", email=user_data.email)
        raise ConflictError(EMAIL_TAKEN_MESSAGE)

    user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        role=UserRole.USER,
    )
    db.add(user)
    await flush_or_conflict(db, EMAIL_TAKEN_MESSAGE, email=user_data.email)
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id, email=user.email)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> str:
    """
    Authenticate user and return JWT access token.
    Raises UnauthorizedError if credentials are invalid.
    """
    result = await db.execute(select(User).where(User.email == login_data.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=login_data.email)
        raise UnauthorizedError("Invalid email or password")

    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    logger.info("user_logged_in", user_id=user.id)
    return token
