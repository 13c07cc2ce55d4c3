"""Ban Store connection - async engine, per-request sessions, readiness ping.

Invariants:
    - A session that raises is rolled back before the error leaves get_db
    - SQLAlchemy failures reach the API as DatabaseError (503), never raw
    - One DatabaseSessionManager per process, created by the FastAPI lifespan

Design Decisions:
    - expire_on_commit=False: ban records are read after the mutation commits
    - SQLite URLs skip pool sizing (aiosqlite uses a static pool)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from app.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_FAILURES: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Ban store constraint violated", "commit"),
    (OperationalError, "Ban store unreachable", "connect"),
    (DBAPIError, "Ban store driver error", "query"),
    (SQLAlchemyError, "Ban store operation failed", "unknown"),
)


def _as_database_error(exc: SQLAlchemyError) -> DatabaseError:
    for exc_type, message, operation in _FAILURES:
        if isinstance(exc, exc_type):
            return DatabaseError(message, operation)
    return DatabaseError("Ban store operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the engine and hands out sessions that roll back on failure."""

    def __init__(
        self, database_url: str, pool_size: int = 10, max_overflow: int = 5,
    ):
        options: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            options.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=1800,
            )
        self.engine = create_async_engine(database_url, **options)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                error = _as_database_error(e)
                logger.error(
                    "Ban store error: %s", e,
                    extra={"error_code": error.code},
                )
                raise error from e
            except Exception:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        """True when a trivial query round-trips."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Ban store ping failed: %s", e)
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager is not None:
        await db_manager.dispose()
        db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
