"""
Ragbot - KnowledgeBaseStore
============================
In-memory home of the knowledge base and its embeddings.

Design decisions:
  • **Owned cache** — embeddings live on the store instance, not in a
    module global, so each app (and each test) has its own.
  • **Single-flight** — the first ``ensure_embedded()`` call embeds the
    whole knowledge base in one batch under an ``asyncio.Lock``.
    Concurrent first callers wait on the lock and then read the
    finished cache; the batch call happens once per process.
  • **Read-only afterwards** — no refresh, eviction, or invalidation.
    A failed batch caches nothing, so a later request tries again.
  • **Dependency Injection** — the embedder is injected, never
    hard-coded, making the store testable with fake embedders.

Usage:
    store = KnowledgeBaseStore(KNOWLEDGE_BASE, embedder)
    documents = await store.ensure_embedded()
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable

from ragbot.src.core.errors import ProviderError
from ragbot.src.core.providers import Embedder
from ragbot.src.core.retrieval import Candidate, Document
from ragbot.src.utils.logger import get_logger

logger = get_logger(__name__)


class KnowledgeBaseStore:
    """
    Fixed list of documents with lazily computed, cached embeddings.

    Parameters
    ----------
    texts
        Knowledge-base entries, in order.  Blank entries are dropped.
    embedder
        Any object satisfying the ``Embedder`` protocol.
    """

    __slots__ = ("_texts", "_embedder", "_documents", "_lock")

    def __init__(self, texts: Iterable[str], embedder: Embedder) -> None:
        self._texts: tuple[str, ...] = tuple(t for t in texts if t and t.strip())
        self._embedder = embedder
        self._documents: tuple[Document, ...] | None = None
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def is_embedded(self) -> bool:
        return self._documents is not None

    def count(self) -> int:
        return len(self._texts)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ensure_embedded(self) -> tuple[Document, ...]:
        """
        Return the embedded documents, computing them on first use.

        Raises
        ------
        ProviderError
            If the batch embedding call fails.  Nothing is cached.
        """
        if self._documents is not None:
            return self._documents

        async with self._lock:
            # Another caller may have finished while we waited
            if self._documents is not None:
                return self._documents

            if not self._texts:
                logger.warning("[STORE] Knowledge base is empty — every query will be refused.")
                self._documents = ()
                return self._documents

            t_start = time.perf_counter()
            vectors = await self._embedder.embed_batch(list(self._texts))
            if len(vectors) != len(self._texts):
                raise ProviderError(f"embed_batch returned {len(vectors)} vectors for {len(self._texts)} documents", operation="embed_batch")

            self._documents = tuple(Document(content=text).with_embedding(vec) for text, vec in zip(self._texts, vectors))
            logger.info("[STORE] Embedded %d document(s) in %.1fms", len(self._documents), (time.perf_counter() - t_start) * 1000)
            return self._documents


    async def candidates(self) -> list[Candidate]:
        """``(content, vector)`` pairs ready for ``rank()``."""
        documents = await self.ensure_embedded()
        return [(doc.content, doc.embedding) for doc in documents if doc.is_embedded]
