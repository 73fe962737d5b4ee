# src/storage/base_database.py - v1
"""Abstract database handle shared by the profile and vector stores.

A database hands out *sessions*. Stores accept an optional ``session``
argument: when given, they run inside the caller's transaction (used to
update a profile and replace its chunks atomically); otherwise they open
their own.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, AsyncIterator


class BaseDatabase(ABC):
    """Connection lifecycle plus transactional sessions."""

    @abstractmethod
    async def connect(self) -> None:
        """Open connections (pool, locks...)."""

    @abstractmethod
    async def close(self) -> None:
        """Release all connections."""

    @abstractmethod
    async def init_schema(self) -> None:
        """Create tables and indexes if missing."""

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[Any]:
        """Session whose writes commit together or not at all."""

    @abstractmethod
    def session(self) -> AbstractAsyncContextManager[Any]:
        """Session for reads; sees only committed state."""

    @asynccontextmanager
    async def scope(self, session: Any = None, write: bool = False) -> AsyncIterator[Any]:
        """Reuse the caller's session, or open a new one for this call."""
        if session is not None:
            yield session
            return
        opener = self.transaction() if write else self.session()
        async with opener as own_session:
            yield own_session

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Backend identifier (postgres, memory)."""

    async def __aenter__(self) -> BaseDatabase:
        await self.connect()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
