"""
Ragbot - RAG Engine
====================
Orchestrates the Retrieval-Augmented Generation pipeline over the
fixed knowledge base.

Architecture
------------
``RAGManager``
    Stateless per request; the only shared state is the
    ``KnowledgeBaseStore`` embedding cache, which is single-flight.
    Flow:
        1. Validate   → query must be a non-empty string
        2. Embed      → query vector via the ``Embedder``
        3. Rank       → knowledge-base embeddings (cached) + cosine ranking
        4. Gate       → best of top-K ≥ threshold?
              no  → localized "no information" sentence (success, no LLM call)
              yes → 5.
        5. Assemble   → top-K contents joined by blank lines
        6. Generate   → system instruction + prompt → ``AnswerGenerator``
        7. Return     → generated text, verbatim

No stage is retried.  Every error aborts the request at the stage that
raised it; partial answers are never returned.

Usage:
    from ragbot.src.core.rag_engine import build_rag_manager
    rag = build_rag_manager()
    answer = await rag.answer("¿Qué idiomas hablas?", "es")
"""

from __future__ import annotations

import time
from collections.abc import Iterable

from ragbot.config.languages import get_no_info_response, language_name, resolve_language
from ragbot.config.prompt_templates import RAG_PROMPT_TEMPLATE, SYSTEM_PROMPT_TEMPLATE
from ragbot.config.settings import settings
from ragbot.src.core.errors import ValidationError
from ragbot.src.core.ingestor import default_knowledge_base
from ragbot.src.core.providers import AnswerGenerator, Embedder, GeminiAnswerGenerator, GeminiEmbedder
from ragbot.src.core.retrieval import assemble_context, is_relevant, rank, top_matches
from ragbot.src.database.vector_store import KnowledgeBaseStore
from ragbot.src.utils.logger import get_logger

logger = get_logger(__name__)


class RAGManager:
    """
    Answers questions strictly from the knowledge base.

    Parameters
    ----------
    store
        The ``KnowledgeBaseStore`` holding the documents.
    embedder
        ``Embedder`` used for the query (the store has its own reference
        for the knowledge base).
    generator
        ``AnswerGenerator`` called only when the gate passes.
    top_k
        Documents handed to the LLM.  Defaults to ``settings.SEARCH_TOP_K``.
    threshold
        Minimum best-match similarity.  Defaults to
        ``settings.RELEVANCE_THRESHOLD``.
    """

    __slots__ = ("_store", "_embedder", "_generator", "_top_k", "_threshold")

    def __init__(self, store: KnowledgeBaseStore, embedder: Embedder, generator: AnswerGenerator, top_k: int | None = None, threshold: float | None = None) -> None:
        self._store = store
        self._embedder = embedder
        self._generator = generator
        self._top_k = top_k if top_k is not None else settings.SEARCH_TOP_K
        self._threshold = threshold if threshold is not None else settings.RELEVANCE_THRESHOLD
        if self._top_k < 1:
            raise ValueError(f"top_k must be ≥ 1, got {self._top_k}")

    @property
    def store(self) -> KnowledgeBaseStore:
        return self._store


    async def answer(self, query: object, language: str | None = None) -> str:
        """
        Run the full pipeline for one question.

        Returns
        -------
        str
            Either the generated answer or the localized refusal.

        Raises
        ------
        ValidationError
            *query* is not a non-empty string.  No provider is called.
        ProviderError
            The embedding or generation call failed.
        DimensionMismatchError
            Query and knowledge-base vectors disagree on dimension.
        """
        t_start = time.perf_counter()

        # ── 1. Validate ───────────────────────────────────────────────
        question = self._validate(query)
        lang = resolve_language(language)

        # ── 2. Embed query ────────────────────────────────────────────
        t_embed = time.perf_counter()
        query_vector = await self._embedder.embed(question)
        embed_ms = (time.perf_counter() - t_embed) * 1000

        # ── 3. Rank against the (cached) knowledge base ───────────────
        t_rank = time.perf_counter()
        candidates = await self._store.candidates()
        ranked = rank(query_vector, candidates)
        rank_ms = (time.perf_counter() - t_rank) * 1000
        best = ranked[0].similarity if ranked else None
        logger.info("[RAG] Ranked %d document(s) in %.1fms (best=%s)", len(ranked), rank_ms, f"{best:.3f}" if best is not None else "n/a")

        # ── 4. Gate ───────────────────────────────────────────────────
        if not is_relevant(ranked, self._top_k, self._threshold):
            logger.info("[RAG] Below threshold %.2f — refusing in '%s'.", self._threshold, lang)
            return get_no_info_response(lang)

        # ── 5. Assemble context ───────────────────────────────────────
        context = assemble_context(top_matches(ranked, self._top_k))

        # ── 6. Generate ───────────────────────────────────────────────
        t_llm = time.perf_counter()
        text = await self._generator.generate(self.build_system_instruction(lang), self.build_prompt(context, question, lang))
        llm_ms = (time.perf_counter() - t_llm) * 1000

        total_ms = (time.perf_counter() - t_start) * 1000
        logger.info("[RAG] Pipeline total: %.1fms (embed=%.1f, rank=%.1f, llm=%.1f, %d chars)", total_ms, embed_ms, rank_ms, llm_ms, len(text))
        return text


    async def warmup(self) -> int:
        """Embed the knowledge base ahead of the first request."""
        documents = await self._store.ensure_embedded()
        return len(documents)

    # ══════════════════════════════════════════════════════════════════
    #  PROMPT FORMATTING
    # ══════════════════════════════════════════════════════════════════

    @staticmethod
    def _validate(query: object) -> str:
        if not isinstance(query, str) or not query:
            raise ValidationError("Query string is required")
        return query


    @staticmethod
    def build_system_instruction(language: str) -> str:
        return SYSTEM_PROMPT_TEMPLATE.format(no_info_response=get_no_info_response(language), language_name=language_name(language), language_code=language)


    @staticmethod
    def build_prompt(context: str, question: str, language: str) -> str:
        return RAG_PROMPT_TEMPLATE.format(context=context, question=question, language_name=language_name(language), language_code=language)


def build_rag_manager(texts: Iterable[str] | None = None, embedder: Embedder | None = None, generator: AnswerGenerator | None = None) -> RAGManager:
    """
    Wire a ``RAGManager`` from settings.

    Missing collaborators default to the Gemini adapters and the
    configured knowledge base.
    """
    if embedder is None:
        embedder = GeminiEmbedder()
    if generator is None:
        generator = GeminiAnswerGenerator()

    store = KnowledgeBaseStore(default_knowledge_base() if texts is None else texts, embedder)
    logger.info("[RAG] Manager ready — %d document(s), top_k=%d, threshold=%.2f", store.count(), settings.SEARCH_TOP_K, settings.RELEVANCE_THRESHOLD)
    return RAGManager(store, embedder, generator)
