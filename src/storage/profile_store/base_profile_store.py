# src/storage/profile_store/base_profile_store.py - v1
"""Abstract relational store for profiles and workspace memberships.

Candidate lookups only ever return profiles with an eligible membership
(active or admin); invited and rejected members are filtered in the
store, before any ranking or LLM call sees them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from meshsearch.core.models import MembershipStatus, Profile


class BaseProfileStore(ABC):
    """Unified interface for profile persistence backends."""

    @abstractmethod
    async def list_workspace_profiles(
        self, workspace_id: str | None, session: Any = None
    ) -> list[Profile]:
        """Profiles with an eligible membership in workspace_id.

        workspace_id=None returns profiles eligible in any workspace.
        Order is stable (creation order).
        """

    @abstractmethod
    async def get_profiles(
        self, profile_ids: list[str], session: Any = None
    ) -> dict[str, Profile]:
        """Fetch profiles by id. Unknown ids are absent from the result."""

    async def get_profile(self, profile_id: str, session: Any = None) -> Profile | None:
        found = await self.get_profiles([profile_id], session=session)
        return found.get(profile_id)

    @abstractmethod
    async def save_profile(self, profile: Profile, session: Any = None) -> None:
        """Insert or update the profile row and upsert its listed memberships.

        Memberships not listed on ``profile`` are left untouched.
        """

    @abstractmethod
    async def save_workspace(
        self, workspace_id: str, name: str, description: str = "", session: Any = None
    ) -> None:
        """Insert or rename a workspace."""

    @abstractmethod
    async def set_membership(
        self,
        workspace_id: str,
        profile_id: str,
        status: MembershipStatus,
        session: Any = None,
    ) -> None:
        """Create or update one membership."""
