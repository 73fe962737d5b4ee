# src/storage/profile_store/postgres_profile_store.py - v1
"""Profile store over the ``users`` / ``workspaces_users`` tables."""

from __future__ import annotations

import logging
from typing import Any

import asyncpg

from meshsearch.core.models import (
    ELIGIBLE_STATUSES,
    MembershipStatus,
    Profile,
    SocialHandles,
    WorkspaceMembership,
)
from meshsearch.storage.postgres_database import PostgresDatabase
from meshsearch.storage.profile_store.base_profile_store import BaseProfileStore

logger = logging.getLogger(__name__)

_ELIGIBLE = [s.value for s in sorted(ELIGIBLE_STATUSES, key=lambda s: s.value)]

_PROFILE_COLUMNS = """
    u.id, u.name, u.content, u.x_handle, u.telegram_handle, u.instagram_handle,
    u.source_hash
"""

LIST_ELIGIBLE_IN_WORKSPACE = f"""
    SELECT {_PROFILE_COLUMNS}
    FROM users u
    WHERE EXISTS (
        SELECT 1 FROM workspaces_users wu
        WHERE wu.user_id = u.id
          AND wu.workspace_id = $1
          AND wu.status = ANY($2::text[])
    )
    ORDER BY u.created_at, u.id
"""

LIST_ELIGIBLE_ANYWHERE = f"""
    SELECT {_PROFILE_COLUMNS}
    FROM users u
    WHERE EXISTS (
        SELECT 1 FROM workspaces_users wu
        WHERE wu.user_id = u.id
          AND wu.status = ANY($1::text[])
    )
    ORDER BY u.created_at, u.id
"""

GET_BY_IDS = f"""
    SELECT {_PROFILE_COLUMNS}
    FROM users u
    WHERE u.id = ANY($1::varchar[])
"""

MEMBERSHIPS_FOR = """
    SELECT user_id, workspace_id, status
    FROM workspaces_users
    WHERE user_id = ANY($1::varchar[])
    ORDER BY created_at, workspace_id
"""

UPSERT_USER = """
    INSERT INTO users (
        id, name, content, x_handle, telegram_handle, instagram_handle, source_hash
    )
    VALUES ($1, $2, $3, $4, $5, $6, $7)
    ON CONFLICT (id) DO UPDATE SET
        name = EXCLUDED.name,
        content = EXCLUDED.content,
        x_handle = EXCLUDED.x_handle,
        telegram_handle = EXCLUDED.telegram_handle,
        instagram_handle = EXCLUDED.instagram_handle,
        source_hash = EXCLUDED.source_hash,
        updated_at = now()
"""

UPSERT_WORKSPACE = """
    INSERT INTO workspaces (id, name, description)
    VALUES ($1, $2, $3)
    ON CONFLICT (id) DO UPDATE SET name = EXCLUDED.name, description = EXCLUDED.description
"""

ENSURE_WORKSPACE = """
    INSERT INTO workspaces (id, name) VALUES ($1, $1)
    ON CONFLICT (id) DO NOTHING
"""

UPSERT_MEMBERSHIP = """
    INSERT INTO workspaces_users (workspace_id, user_id, status)
    VALUES ($1, $2, $3)
    ON CONFLICT (workspace_id, user_id) DO UPDATE SET status = EXCLUDED.status
"""


def _row_to_profile(
    row: asyncpg.Record, memberships: list[WorkspaceMembership]
) -> Profile:
    return Profile(
        id=row["id"],
        display_name=row["name"],
        raw_content=row["content"] or "",
        social_handles=SocialHandles(
            x=row["x_handle"],
            telegram=row["telegram_handle"],
            instagram=row["instagram_handle"],
        ),
        memberships=memberships,
        source_hash=row["source_hash"],
    )


class PostgresProfileStore(BaseProfileStore):
    """asyncpg-backed profile store."""

    def __init__(self, database: PostgresDatabase) -> None:
        self._db = database

    async def list_workspace_profiles(
        self, workspace_id: str | None, session: Any = None
    ) -> list[Profile]:
        async with self._db.scope(session) as conn:
            if workspace_id is None:
                rows = await conn.fetch(LIST_ELIGIBLE_ANYWHERE, _ELIGIBLE)
            else:
                rows = await conn.fetch(LIST_ELIGIBLE_IN_WORKSPACE, workspace_id, _ELIGIBLE)
            return await self._with_memberships(conn, rows)

    async def get_profiles(
        self, profile_ids: list[str], session: Any = None
    ) -> dict[str, Profile]:
        if not profile_ids:
            return {}
        async with self._db.scope(session) as conn:
            rows = await conn.fetch(GET_BY_IDS, list(dict.fromkeys(profile_ids)))
            profiles = await self._with_memberships(conn, rows)
        return {p.id: p for p in profiles}

    async def save_profile(self, profile: Profile, session: Any = None) -> None:
        handles = profile.social_handles
        async with self._db.scope(session, write=True) as conn:
            await conn.execute(
                UPSERT_USER,
                profile.id,
                profile.display_name,
                profile.raw_content,
                handles.x,
                handles.telegram,
                handles.instagram,
                profile.source_hash,
            )
            for membership in profile.memberships:
                await conn.execute(ENSURE_WORKSPACE, membership.workspace_id)
                await conn.execute(
                    UPSERT_MEMBERSHIP,
                    membership.workspace_id,
                    profile.id,
                    membership.status.value,
                )

    async def save_workspace(
        self, workspace_id: str, name: str, description: str = "", session: Any = None
    ) -> None:
        async with self._db.scope(session, write=True) as conn:
            await conn.execute(UPSERT_WORKSPACE, workspace_id, name, description)

    async def set_membership(
        self,
        workspace_id: str,
        profile_id: str,
        status: MembershipStatus,
        session: Any = None,
    ) -> None:
        async with self._db.scope(session, write=True) as conn:
            await conn.execute(ENSURE_WORKSPACE, workspace_id)
            await conn.execute(UPSERT_MEMBERSHIP, workspace_id, profile_id, status.value)

    @staticmethod
    async def _with_memberships(
        conn: asyncpg.Connection, rows: list[asyncpg.Record]
    ) -> list[Profile]:
        if not rows:
            return []
        ids = [row["id"] for row in rows]
        by_user: dict[str, list[WorkspaceMembership]] = {pid: [] for pid in ids}
        for m in await conn.fetch(MEMBERSHIPS_FOR, ids):
            by_user[m["user_id"]].append(
                WorkspaceMembership(
                    workspace_id=m["workspace_id"],
                    status=MembershipStatus(m["status"]),
                )
            )
        return [_row_to_profile(row, by_user[row["id"]]) for row in rows]
