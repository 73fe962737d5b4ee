# src/storage/profile_store/memory_profile_store.py - v1
"""Profile store over MemoryDatabase.

Returned profiles are deep copies; mutating them never touches the
stored state.
"""

from __future__ import annotations

from typing import Any

from meshsearch.core.models import MembershipStatus, Profile, WorkspaceMembership
from meshsearch.storage.memory_database import MemoryDatabase, MemoryState
from meshsearch.storage.profile_store.base_profile_store import BaseProfileStore


class MemoryProfileStore(BaseProfileStore):
    """Dict-backed profile store."""

    def __init__(self, database: MemoryDatabase) -> None:
        self._db = database

    async def list_workspace_profiles(
        self, workspace_id: str | None, session: Any = None
    ) -> list[Profile]:
        async with self._db.scope(session) as state:
            return [
                p.model_copy(deep=True)
                for p in state.profiles.values()
                if p.is_eligible_in(workspace_id)
            ]

    async def get_profiles(
        self, profile_ids: list[str], session: Any = None
    ) -> dict[str, Profile]:
        async with self._db.scope(session) as state:
            return {
                pid: state.profiles[pid].model_copy(deep=True)
                for pid in dict.fromkeys(profile_ids)
                if pid in state.profiles
            }

    async def save_profile(self, profile: Profile, session: Any = None) -> None:
        async with self._db.scope(session, write=True) as state:
            existing = state.profiles.get(profile.id)
            memberships: dict[str, WorkspaceMembership] = {}
            if existing is not None:
                memberships = {m.workspace_id: m for m in existing.memberships}
            for membership in profile.memberships:
                _ensure_workspace(state, membership.workspace_id)
                memberships[membership.workspace_id] = membership.model_copy()
            state.profiles[profile.id] = profile.model_copy(
                deep=True, update={"memberships": list(memberships.values())}
            )

    async def save_workspace(
        self, workspace_id: str, name: str, description: str = "", session: Any = None
    ) -> None:
        async with self._db.scope(session, write=True) as state:
            state.workspaces[workspace_id] = name

    async def set_membership(
        self,
        workspace_id: str,
        profile_id: str,
        status: MembershipStatus,
        session: Any = None,
    ) -> None:
        async with self._db.scope(session, write=True) as state:
            profile = state.profiles.get(profile_id)
            if profile is None:
                raise KeyError(f"Unknown profile: {profile_id}")
            _ensure_workspace(state, workspace_id)
            others = [m for m in profile.memberships if m.workspace_id != workspace_id]
            others.append(WorkspaceMembership(workspace_id=workspace_id, status=status))
            profile.memberships = others


def _ensure_workspace(state: MemoryState, workspace_id: str) -> None:
    state.workspaces.setdefault(workspace_id, workspace_id)
