"""
Database access object and the per-request session dependency
"""
import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
)


logger = logging.getLogger(__name__)


class Database:
    """
    Owns the async engine and session factory for the record store.

    Constructed once at process start, disposed at shutdown and passed to
    whatever needs store access.
    """

    def __init__(self, url: str, *, echo: bool = False, **engine_kwargs) -> None:
        self.url = url
        self.echo = echo
        self.engine_kwargs = engine_kwargs
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._owns_engine = True

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "Database":
        db = cls(str(engine.url))
        db._engine = engine
        db._session_factory = async_sessionmaker(engine, expire_on_commit=False)
        # The caller created the engine and stays responsible for disposing it.
        db._owns_engine = False
        return db

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    def connect(self) -> None:
        if self._engine is not None:
            return
        self._engine = create_async_engine(self.url, echo=self.echo, **self.engine_kwargs)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)
        logger.info(f"Database engine created for {self._engine.url.render_as_string()}")

    async def disconnect(self) -> None:
        if self._engine is None or not self._owns_engine:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database engine disposed")

    def session(self) -> AsyncSession:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        return self._session_factory()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Write endpoints commit before building their response, so a failed
    commit still reaches the client as an error. Anything left uncommitted
    is discarded when the session closes, and errors roll back explicitly.
    """
    database: Database = request.app.state.db
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
