"""
Ragbot - Model Providers
=========================
Narrow async interfaces over the hosted model service, plus their
Gemini implementations.

``Embedder``
    ``embed(text)`` for one query, ``embed_batch(texts)`` for the
    knowledge base.  Order and count of the batch result match the input.
``AnswerGenerator``
    ``generate(system_instruction, prompt)`` → text.

Both Gemini adapters go through ``langchain-google-genai`` and turn
every upstream failure into ``ProviderError`` (``ProviderTimeoutError``
when the deadline expires).  Responses are validated before they are
returned: an empty or inconsistent vector is a provider failure, never
silently replaced.

Test code swaps these for in-memory doubles satisfying the protocols.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Sequence
from typing import Protocol, TypeVar, runtime_checkable

import numpy as np

from ragbot.config.settings import settings
from ragbot.src.core.errors import ProviderError, ProviderTimeoutError
from ragbot.src.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


# ══════════════════════════════════════════════════════════════════════
#  PROTOCOLS
# ══════════════════════════════════════════════════════════════════════


@runtime_checkable
class Embedder(Protocol):
    """Anything that can produce embedding vectors from text."""

    async def embed(self, text: str) -> list[float]: ...

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]: ...


@runtime_checkable
class AnswerGenerator(Protocol):
    """Anything that can turn a system instruction + prompt into text."""

    async def generate(self, system_instruction: str, prompt: str) -> str: ...


# ══════════════════════════════════════════════════════════════════════
#  HELPERS
# ══════════════════════════════════════════════════════════════════════


async def call_with_deadline(awaitable: Awaitable[T], operation: str, timeout: float | None) -> T:
    """
    Await *awaitable*, mapping every failure to ``ProviderError``.

    ``timeout`` of ``None`` or ``<= 0`` means no deadline.
    """
    try:
        if timeout is not None and timeout > 0:
            return await asyncio.wait_for(awaitable, timeout=timeout)
        return await awaitable
    except asyncio.TimeoutError as exc:
        raise ProviderTimeoutError(f"{operation} timed out (deadline={timeout}s)", operation=operation) from exc
    except ProviderError:
        raise
    except Exception as exc:
        raise ProviderError(f"{operation} failed: {type(exc).__name__}", operation=operation) from exc


def validate_vector(vector: object, operation: str) -> list[float]:
    """Reject anything that is not a non-empty, flat sequence of numbers."""
    if isinstance(vector, np.ndarray):
        vector = vector.tolist() if vector.ndim == 1 else None
    if not isinstance(vector, Sequence) or isinstance(vector, (str, bytes)) or len(vector) == 0:
        raise ProviderError(f"{operation} returned an empty or malformed vector", operation=operation)
    try:
        return [float(x) for x in vector]
    except (TypeError, ValueError) as exc:
        raise ProviderError(f"{operation} returned non-numeric vector values", operation=operation) from exc


def validate_batch(vectors: object, expected_count: int, operation: str) -> list[list[float]]:
    """Check count, per-vector shape and a single shared dimension."""
    if isinstance(vectors, np.ndarray) and vectors.ndim == 2:
        vectors = list(vectors)
    if not isinstance(vectors, Sequence) or len(vectors) != expected_count:
        got = len(vectors) if isinstance(vectors, Sequence) else type(vectors).__name__
        raise ProviderError(f"{operation} returned {got} vectors for {expected_count} texts", operation=operation)

    checked = [validate_vector(v, operation) for v in vectors]
    dimensions = {len(v) for v in checked}
    if len(dimensions) > 1:
        raise ProviderError(f"{operation} returned vectors of mixed dimensions {sorted(dimensions)}", operation=operation)
    return checked


def message_text(content: object) -> str:
    """
    Extract text from a chat-model message ``content``.

    LangChain returns either a plain string or a list of parts
    (strings or ``{"type": "text", "text": ...}`` dicts).
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        if parts:
            return "".join(parts)
    raise ProviderError("generate returned a response without text", operation="generate")


# ══════════════════════════════════════════════════════════════════════
#  GEMINI EMBEDDER
# ══════════════════════════════════════════════════════════════════════


class GeminiEmbedder:
    """
    ``Embedder`` backed by ``GoogleGenerativeAIEmbeddings``.

    Queries use ``aembed_query`` (retrieval-query task type) and the
    knowledge base uses ``aembed_documents`` (retrieval-document task
    type), which is how Gemini expects the two sides of a search.

    Parameters
    ----------
    model
        Embedding model id.  Defaults to ``settings.EMBEDDING_MODEL``.
    timeout
        Per-call deadline in seconds.  Defaults to
        ``settings.PROVIDER_TIMEOUT_SECONDS``.
    client
        A pre-built LangChain embeddings object (mainly for tests).
    """

    __slots__ = ("_model", "_timeout", "_client")

    def __init__(self, model: str | None = None, timeout: float | None = None, client: object | None = None) -> None:
        self._model = model or settings.EMBEDDING_MODEL
        self._timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT_SECONDS
        self._client = client or self._init_client(self._model)


    @staticmethod
    def _init_client(model: str) -> object:
        from langchain_google_genai import GoogleGenerativeAIEmbeddings

        client = GoogleGenerativeAIEmbeddings(model=model, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())
        logger.info("[PROVIDER] Embedder initialised: %s", model)
        return client


    async def embed(self, text: str) -> list[float]:
        vector = await call_with_deadline(self._client.aembed_query(text), "embed", self._timeout)  # type: ignore[attr-defined]
        return validate_vector(vector, "embed")


    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        vectors = await call_with_deadline(self._client.aembed_documents(list(texts)), "embed_batch", self._timeout)  # type: ignore[attr-defined]
        checked = validate_batch(vectors, len(texts), "embed_batch")
        logger.debug("[PROVIDER] Embedded %d document(s), dimension=%d", len(checked), len(checked[0]))
        return checked


# ══════════════════════════════════════════════════════════════════════
#  GEMINI ANSWER GENERATOR
# ══════════════════════════════════════════════════════════════════════


class GeminiAnswerGenerator:
    """
    ``AnswerGenerator`` backed by ``ChatGoogleGenerativeAI``.

    Sends ``[SystemMessage(system_instruction), HumanMessage(prompt)]``
    and returns the model's text unchanged.  No retries.
    """

    __slots__ = ("_model", "_timeout", "_llm")

    def __init__(self, model: str | None = None, temperature: float | None = None, timeout: float | None = None, llm: object | None = None) -> None:
        self._model = model or settings.LLM_MODEL
        self._timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT_SECONDS
        self._llm = llm or self._init_llm(self._model, settings.LLM_TEMPERATURE if temperature is None else temperature)


    @staticmethod
    def _init_llm(model: str, temperature: float) -> object:
        """Initialise the Gemini LLM via LangChain."""
        from langchain_google_genai import ChatGoogleGenerativeAI

        llm = ChatGoogleGenerativeAI(model=model, temperature=temperature, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())
        logger.info("[PROVIDER] LLM initialised: %s (temperature=%.1f)", model, temperature)
        return llm


    async def generate(self, system_instruction: str, prompt: str) -> str:
        from langchain_core.messages import HumanMessage, SystemMessage

        messages = [SystemMessage(content=system_instruction), HumanMessage(content=prompt)]
        response = await call_with_deadline(self._llm.ainvoke(messages), "generate", self._timeout)  # type: ignore[attr-defined]
        return message_text(getattr(response, "content", response))
