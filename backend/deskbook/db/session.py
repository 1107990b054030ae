"""
Async engine and per-request session dependency.

The session is committed when the request handler returns normally and
rolled back when it raises, so services only ever flush.
"""

from typing import AsyncGenerator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from deskbook.core.config import get_settings
from deskbook.core.exceptions import ConflictError
from deskbook.core.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_timeout=settings.DB_POOL_TIMEOUT,
    pool_recycle=settings.DB_POOL_RECYCLE,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def flush_or_conflict(db: AsyncSession, message: str, **context) -> None:
    """
    Flush pending writes. A unique-constraint violation is rolled back and
    raised as ConflictError(message); the constraint is the final word when
    two requests pass the same pre-check.
    """
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("unique_violation", error=str(e.orig), **context)
        raise ConflictError(message)
