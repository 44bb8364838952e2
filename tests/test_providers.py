"""Tests for the Gemini provider adapters, using stand-in LangChain clients."""

import asyncio
from types import SimpleNamespace

import numpy as np
import pytest
from langchain_core.messages import HumanMessage, SystemMessage

from ragbot.src.core.errors import ProviderError, ProviderTimeoutError
from ragbot.src.core.providers import AnswerGenerator, Embedder, GeminiAnswerGenerator, GeminiEmbedder, call_with_deadline, message_text, validate_batch, validate_vector


class StubEmbeddings:
    """Mimics ``GoogleGenerativeAIEmbeddings``' async surface."""

    def __init__(self, query_result=None, documents_result=None, error=None, delay=0.0):
        self.query_result = query_result if query_result is not None else [0.1, 0.2, 0.3]
        self.documents_result = documents_result
        self.error = error
        self.delay = delay
        self.calls = []

    async def aembed_query(self, text):
        self.calls.append(("query", text))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.query_result

    async def aembed_documents(self, texts):
        self.calls.append(("documents", list(texts)))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        if self.documents_result is not None:
            return self.documents_result
        return [[float(i), 1.0] for i, _ in enumerate(texts)]


class StubChatModel:
    """Mimics ``ChatGoogleGenerativeAI.ainvoke``."""

    def __init__(self, content="hola", error=None, delay=0.0):
        self.content = content
        self.error = error
        self.delay = delay
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return SimpleNamespace(content=self.content)


# ============================================================================
# Embedder
# ============================================================================


class TestGeminiEmbedder:
    def test_satisfies_protocol(self):
        assert isinstance(GeminiEmbedder(client=StubEmbeddings()), Embedder)

    @pytest.mark.asyncio
    async def test_embed_returns_floats(self):
        client = StubEmbeddings(query_result=[1, 2, 3])
        vector = await GeminiEmbedder(client=client).embed("hola")

        assert vector == [1.0, 2.0, 3.0]
        assert client.calls == [("query", "hola")]

    @pytest.mark.asyncio
    async def test_embed_batch_preserves_order_and_count(self):
        client = StubEmbeddings()
        vectors = await GeminiEmbedder(client=client).embed_batch(["a", "b", "c"])

        assert vectors == [[0.0, 1.0], [1.0, 1.0], [2.0, 1.0]]
        assert client.calls == [("documents", ["a", "b", "c"])]

    @pytest.mark.asyncio
    async def test_empty_batch_skips_the_call(self):
        client = StubEmbeddings()
        assert await GeminiEmbedder(client=client).embed_batch([]) == []
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_zero_length_vector_is_an_error(self):
        with pytest.raises(ProviderError):
            await GeminiEmbedder(client=StubEmbeddings(query_result=[])).embed("hola")

    @pytest.mark.asyncio
    async def test_wrong_batch_count_is_an_error(self):
        client = StubEmbeddings(documents_result=[[1.0, 0.0]])
        with pytest.raises(ProviderError):
            await GeminiEmbedder(client=client).embed_batch(["a", "b"])

    @pytest.mark.asyncio
    async def test_mixed_dimensions_are_an_error(self):
        client = StubEmbeddings(documents_result=[[1.0, 0.0], [1.0, 0.0, 0.0]])
        with pytest.raises(ProviderError):
            await GeminiEmbedder(client=client).embed_batch(["a", "b"])

    @pytest.mark.asyncio
    async def test_upstream_exception_is_wrapped(self):
        cause = RuntimeError("quota exceeded")
        with pytest.raises(ProviderError) as excinfo:
            await GeminiEmbedder(client=StubEmbeddings(error=cause)).embed("hola")

        assert excinfo.value.__cause__ is cause
        assert excinfo.value.operation == "embed"
        assert "quota exceeded" not in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_timeout(self):
        embedder = GeminiEmbedder(client=StubEmbeddings(delay=0.2), timeout=0.01)
        with pytest.raises(ProviderTimeoutError):
            await embedder.embed("hola")


# ============================================================================
# Answer generator
# ============================================================================


class TestGeminiAnswerGenerator:
    def test_satisfies_protocol(self):
        assert isinstance(GeminiAnswerGenerator(llm=StubChatModel()), AnswerGenerator)

    @pytest.mark.asyncio
    async def test_sends_system_and_human_messages(self):
        llm = StubChatModel(content="Respuesta")
        text = await GeminiAnswerGenerator(llm=llm).generate("instructions", "prompt")

        assert text == "Respuesta"
        messages = llm.calls[0]
        assert isinstance(messages[0], SystemMessage)
        assert isinstance(messages[1], HumanMessage)
        assert messages[0].content == "instructions"
        assert messages[1].content == "prompt"

    @pytest.mark.asyncio
    async def test_returns_text_verbatim(self):
        raw = "  Línea 1\n\nLínea 2  "
        assert await GeminiAnswerGenerator(llm=StubChatModel(content=raw)).generate("s", "p") == raw

    @pytest.mark.asyncio
    async def test_content_parts_are_joined(self):
        llm = StubChatModel(content=[{"type": "text", "text": "Hola, "}, "mundo"])
        assert await GeminiAnswerGenerator(llm=llm).generate("s", "p") == "Hola, mundo"

    @pytest.mark.asyncio
    async def test_non_text_response_is_an_error(self):
        with pytest.raises(ProviderError):
            await GeminiAnswerGenerator(llm=StubChatModel(content=None)).generate("s", "p")

    @pytest.mark.asyncio
    async def test_upstream_exception_is_wrapped(self):
        with pytest.raises(ProviderError) as excinfo:
            await GeminiAnswerGenerator(llm=StubChatModel(error=ConnectionError("reset"))).generate("s", "p")
        assert excinfo.value.operation == "generate"

    @pytest.mark.asyncio
    async def test_timeout(self):
        generator = GeminiAnswerGenerator(llm=StubChatModel(delay=0.2), timeout=0.01)
        with pytest.raises(ProviderTimeoutError):
            await generator.generate("s", "p")


# ============================================================================
# Helpers
# ============================================================================


@pytest.mark.asyncio
async def test_no_deadline_when_disabled():
    async def slow():
        await asyncio.sleep(0.01)
        return "done"

    assert await call_with_deadline(slow(), "op", None) == "done"
    assert await call_with_deadline(slow(), "op", 0) == "done"


@pytest.mark.asyncio
async def test_provider_errors_pass_through_unchanged():
    original = ProviderError("already wrapped", operation="inner")

    async def failing():
        raise original

    with pytest.raises(ProviderError) as excinfo:
        await call_with_deadline(failing(), "outer", None)
    assert excinfo.value is original


@pytest.mark.parametrize("bad", [None, "abc", [], ["x", "y"], 3.0])
def test_validate_vector_rejects_malformed(bad):
    with pytest.raises(ProviderError):
        validate_vector(bad, "embed")


def test_validate_batch_accepts_consistent_vectors():
    assert validate_batch([[1, 2], [3, 4]], 2, "embed_batch") == [[1.0, 2.0], [3.0, 4.0]]


def test_validate_vector_accepts_numpy_array():
    assert validate_vector(np.array([0.5, -1.0, 2.0], dtype=np.float32), "embed") == [0.5, -1.0, 2.0]


@pytest.mark.parametrize("bad", [np.array([]), np.array([[1.0, 2.0]]), np.float64(1.0)])
def test_validate_vector_rejects_malformed_numpy(bad):
    with pytest.raises(ProviderError):
        validate_vector(bad, "embed")


def test_validate_batch_accepts_numpy_matrix():
    assert validate_batch(np.array([[1.0, 2.0], [3.0, 4.0]]), 2, "embed_batch") == [[1.0, 2.0], [3.0, 4.0]]


def test_message_text_plain_string():
    assert message_text("hola") == "hola"
