"""Shared pytest fixtures for Ragbot tests.

Provides in-memory embedding / generation providers and a factory for
wired ``RAGManager`` instances, so no test touches the network.
"""

import asyncio
import os
from collections.abc import Callable, Sequence

# Settings refuse to load without an API key; seed a dummy before any
# ragbot import happens.
os.environ.setdefault("GOOGLE_API_KEY", "test-key")

import pytest

from ragbot.src.core.rag_engine import RAGManager
from ragbot.src.database.vector_store import KnowledgeBaseStore

# ============================================================================
# Knowledge-base fixture data
# ============================================================================

LANGUAGES_DOC = "Lucía habla español (nativo), inglés (avanzado) y nociones básicas de chino."
WORK_DOC = "Desde 2024 Lucía trabaja como desarrolladora backend con Python, Android y Linux."
HOBBIES_DOC = "A Lucía le gusta viajar, leer ciencia ficción y tocar la guitarra española."

KB_VECTORS: dict[str, list[float]] = {
    LANGUAGES_DOC: [1.0, 0.0, 0.0],
    WORK_DOC: [0.0, 1.0, 0.0],
    HOBBIES_DOC: [0.0, 0.0, 1.0],
}


# ============================================================================
# Fake providers
# ============================================================================


class FakeEmbedder:
    """Embedder returning canned vectors, counting every call."""

    def __init__(self, vectors: dict[str, list[float]] | None = None, default: list[float] | None = None, delay: float = 0.0, batch_error: Exception | None = None, query_error: Exception | None = None):
        self.vectors = dict(vectors or {})
        self.default = default or [0.0, 0.0, 0.0]
        self.delay = delay
        self.batch_error = batch_error
        self.query_error = query_error
        self.query_calls: list[str] = []
        self.batch_calls: list[list[str]] = []

    async def embed(self, text: str) -> list[float]:
        self.query_calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.query_error is not None:
            raise self.query_error
        return list(self.vectors.get(text, self.default))

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.batch_error is not None:
            raise self.batch_error
        return [list(self.vectors.get(text, self.default)) for text in texts]

    @property
    def total_calls(self) -> int:
        return len(self.query_calls) + len(self.batch_calls)


class FakeGenerator:
    """AnswerGenerator that records its inputs and returns a fixed answer."""

    def __init__(self, answer: str = "Respuesta generada.", error: Exception | None = None):
        self.answer = answer
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def generate(self, system_instruction: str, prompt: str) -> str:
        self.calls.append((system_instruction, prompt))
        if self.error is not None:
            raise self.error
        return self.answer

    @property
    def last_system_instruction(self) -> str:
        return self.calls[-1][0]

    @property
    def last_prompt(self) -> str:
        return self.calls[-1][1]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_embedder_class() -> type[FakeEmbedder]:
    return FakeEmbedder


@pytest.fixture
def fake_generator_class() -> type[FakeGenerator]:
    return FakeGenerator


@pytest.fixture
def kb_vectors() -> dict[str, list[float]]:
    return dict(KB_VECTORS)


@pytest.fixture
def kb_texts() -> list[str]:
    return [LANGUAGES_DOC, WORK_DOC, HOBBIES_DOC]


@pytest.fixture
def make_manager(kb_texts: list[str], kb_vectors: dict[str, list[float]]) -> Callable[..., tuple[RAGManager, FakeEmbedder, FakeGenerator]]:
    """Build a ``RAGManager`` over the fixture knowledge base.

    ``query_vectors`` maps question text to its embedding; everything
    else embeds to ``default``.
    """

    def _make(query_vectors: dict[str, list[float]] | None = None, texts: list[str] | None = None, answer: str = "Respuesta generada.", default: list[float] | None = None, delay: float = 0.0, **embedder_kwargs) -> tuple[RAGManager, FakeEmbedder, FakeGenerator]:
        embedder = FakeEmbedder({**kb_vectors, **(query_vectors or {})}, default=default, delay=delay, **embedder_kwargs)
        generator = FakeGenerator(answer=answer)
        store = KnowledgeBaseStore(kb_texts if texts is None else texts, embedder)
        return RAGManager(store, embedder, generator, top_k=3, threshold=0.75), embedder, generator

    return _make
