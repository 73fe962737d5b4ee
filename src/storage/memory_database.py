# src/storage/memory_database.py - v1
"""In-process database for local development and tests.

All access is serialized by one asyncio.Lock, so readers never observe a
half-applied transaction. A transaction works on the live state and
restores a deep-copied snapshot if the block raises.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator

from meshsearch.core.models import Chunk, Profile
from meshsearch.storage.base_database import BaseDatabase

logger = logging.getLogger(__name__)


@dataclass
class MemoryState:
    """Tables of the in-memory backend."""

    profiles: dict[str, Profile] = field(default_factory=dict)
    workspaces: dict[str, str] = field(default_factory=dict)  # id -> name
    chunks: dict[str, list[Chunk]] = field(default_factory=dict)  # owner_id -> chunks

    def restore(self, snapshot: MemoryState) -> None:
        self.profiles = snapshot.profiles
        self.workspaces = snapshot.workspaces
        self.chunks = snapshot.chunks


class MemoryDatabase(BaseDatabase):
    """Dict-backed database with lock-serialized sessions."""

    def __init__(self) -> None:
        self._state = MemoryState()
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        logger.debug("Memory database ready")

    async def close(self) -> None:
        return None

    async def init_schema(self) -> None:
        return None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[MemoryState]:
        async with self._lock:
            snapshot = copy.deepcopy(self._state)
            try:
                yield self._state
            except BaseException:
                self._state.restore(snapshot)
                logger.debug("Memory transaction rolled back")
                raise

    @asynccontextmanager
    async def session(self) -> AsyncIterator[MemoryState]:
        async with self._lock:
            yield self._state

    @property
    def backend_name(self) -> str:
        return "memory"
