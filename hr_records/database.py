"""Record store — the single async handle to the hosted relational backend.

The store is built once at process start (see ``hr_records.main``) and
handed to request handlers through ``Depends(get_store)``; nothing in the
package imports a shared client instance.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import func, select
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from hr_records.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class RecordStore:
    """Long-lived backend handle: engine + session factory."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def connect(
        cls,
        base_url: str,
        access_key: Optional[str] = None,
        **engine_kwargs: Any,
    ) -> "RecordStore":
        """Create a store from a base URL and an access key.

        The access key is used as the connection password so that the
        URL checked into deployment config never carries the secret.
        """
        url = make_url(base_url)
        if access_key:
            url = url.set(password=access_key)
        logger.info("Connecting record store to %s", url.render_as_string(hide_password=True))
        return cls(create_async_engine(url, **engine_kwargs))

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """One unit of work: commit on success, rollback and re-raise on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def call(self, function_name: str, *args: Any) -> Any:
        """Invoke a named server-side function and return its scalar result."""
        async with self.session() as session:
            result = await session.execute(
                select(getattr(func, function_name)(*args)),
            )
            return result.scalar()

    async def dispose(self) -> None:
        await self.engine.dispose()


def create_store(settings: Settings) -> RecordStore:
    """Build the process-wide store from settings."""
    engine_kwargs: dict[str, Any] = {
        "echo": settings.ENVIRONMENT == "development" and settings.LOG_LEVEL == "debug",
        "pool_pre_ping": True,
    }
    if not settings.DATABASE_URL.startswith("sqlite"):
        engine_kwargs["pool_size"] = settings.DATABASE_POOL_SIZE
    return RecordStore.connect(
        settings.DATABASE_URL,
        settings.DATABASE_ACCESS_KEY or None,
        **engine_kwargs,
    )


def get_store(request: Request) -> RecordStore:
    """FastAPI dependency: the store attached to the running app."""
    return request.app.state.store
