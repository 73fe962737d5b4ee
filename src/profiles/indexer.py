# src/profiles/indexer.py - v1
"""Profile indexing: content -> sentence chunks -> embeddings -> store.

Chunks are computed and embedded before any write. The profile row and
its chunk set are then replaced in one transaction, so a search never
sees the new content with the old chunks (or the reverse), and an
embedding failure leaves the stored profile untouched.
"""

from __future__ import annotations

import logging
import time

from pydantic import BaseModel

from meshsearch.chunking.base_chunker import BaseChunker
from meshsearch.core.errors import ProfileNotFoundError
from meshsearch.core.models import Chunk, Profile, SocialHandles
from meshsearch.logging.context import set_component_context, set_stage
from meshsearch.profiles.describer import ProfileDescriber
from meshsearch.profiles.fingerprint import content_fingerprint
from meshsearch.profiles.form_content import FormAnswer, ProfileForm
from meshsearch.rag.embeddings.embedding_service import EmbeddingService
from meshsearch.rag.vector_store.base_vector_store import BaseVectorStore
from meshsearch.storage.base_database import BaseDatabase
from meshsearch.storage.profile_store.base_profile_store import BaseProfileStore

logger = logging.getLogger(__name__)


class IndexResult(BaseModel):
    """Outcome of one profile write."""

    profile_id: str
    chunks_indexed: int
    content_changed: bool


class ProfileIndexer:
    """Keeps each profile's chunk set in sync with its content."""

    def __init__(
        self,
        database: BaseDatabase,
        profile_store: BaseProfileStore,
        vector_store: BaseVectorStore,
        embeddings: EmbeddingService,
        chunker: BaseChunker,
        describer: ProfileDescriber | None = None,
    ) -> None:
        self._db = database
        self._profiles = profile_store
        self._vectors = vector_store
        self._embeddings = embeddings
        self._chunker = chunker
        self._describer = describer

    async def embed_content(self, owner_id: str, content: str) -> list[Chunk]:
        """Split ``content`` into sentence chunks and embed them in order.

        Raises:
            EmbeddingFailure: Propagated unchanged; nothing is written.
        """
        texts = self._chunker.split(content)
        if not texts:
            return []
        vectors = await self._embeddings.embed_many(texts)
        return [
            Chunk(owner_id=owner_id, text=text, vector=vector)
            for text, vector in zip(texts, vectors)
        ]

    async def index_profile(self, profile: Profile) -> IndexResult:
        """Create or replace ``profile`` together with its chunks."""
        if profile.source_hash is None:
            profile = profile.model_copy(
                update={"source_hash": content_fingerprint(profile.raw_content)}
            )
        set_component_context("indexer", stage="embed")
        chunks = await self.embed_content(profile.id, profile.raw_content)

        set_stage("write")
        async with self._db.transaction() as session:
            await self._profiles.save_profile(profile, session=session)
            await self._vectors.upsert_chunks(profile.id, chunks, session=session)
        logger.info("Indexed profile %s (%d chunks)", profile.id, len(chunks))
        return IndexResult(
            profile_id=profile.id, chunks_indexed=len(chunks), content_changed=True,
        )

    async def update_profile(
        self,
        profile_id: str,
        *,
        content: str | None = None,
        answers: list[FormAnswer] | None = None,
        display_name: str | None = None,
        social_handles: SocialHandles | None = None,
    ) -> IndexResult:
        """Apply a member's edit and refresh chunks when the content changed.

        ``answers`` takes precedence over ``content``. Change is detected on
        the submitted text, before any rewrite. When neither is given, or
        the text matches the last submission, only the name and handles are
        updated and the existing chunks are kept.

        Raises:
            ProfileNotFoundError: ``profile_id`` does not exist.
            EmbeddingFailure: Chunks could not be embedded; nothing is written.
        """
        set_component_context("indexer", stage="load")
        existing = await self._profiles.get_profile(profile_id)
        if existing is None:
            raise ProfileNotFoundError(profile_id)

        source: str | None = None
        if answers:
            source = ProfileForm(answers=answers).to_content()
        elif content is not None:
            source = content.strip()

        new_content = existing.raw_content
        new_hash = existing.source_hash
        changed = False
        if source is not None:
            new_hash = content_fingerprint(source)
            previous = existing.source_hash or content_fingerprint(existing.raw_content)
            changed = new_hash != previous
        if changed:
            new_content = source
            if new_content and self._describer is not None:
                set_stage("describe")
                new_content = await self._describer.describe(new_content)

        updates: dict[str, object] = {"raw_content": new_content, "source_hash": new_hash}
        if display_name is not None:
            updates["display_name"] = display_name
        if social_handles is not None:
            updates["social_handles"] = social_handles
        updated = existing.model_copy(update=updates)

        chunks: list[Chunk] = []
        if changed:
            set_stage("embed")
            start = time.monotonic()
            chunks = await self.embed_content(profile_id, new_content)
            logger.debug(
                "Embedded %d chunks in %dms",
                len(chunks), int((time.monotonic() - start) * 1000),
            )

        set_stage("write")
        async with self._db.transaction() as session:
            await self._profiles.save_profile(updated, session=session)
            if changed:
                await self._vectors.upsert_chunks(profile_id, chunks, session=session)

        if changed:
            logger.info("Profile %s re-indexed (%d chunks)", profile_id, len(chunks))
            indexed = len(chunks)
        else:
            logger.info("Profile %s updated, content unchanged", profile_id)
            indexed = await self._vectors.count(profile_id)
        return IndexResult(
            profile_id=profile_id, chunks_indexed=indexed, content_changed=changed,
        )

    async def reindex(self, profile_id: str) -> IndexResult:
        """Rebuild chunks from the stored content (e.g. after a model change)."""
        set_component_context("indexer", stage="load")
        existing = await self._profiles.get_profile(profile_id)
        if existing is None:
            raise ProfileNotFoundError(profile_id)

        set_stage("embed")
        chunks = await self.embed_content(profile_id, existing.raw_content)
        set_stage("write")
        async with self._db.transaction() as session:
            await self._vectors.upsert_chunks(profile_id, chunks, session=session)
        logger.info("Profile %s rebuilt (%d chunks)", profile_id, len(chunks))
        return IndexResult(
            profile_id=profile_id, chunks_indexed=len(chunks), content_changed=False,
        )
