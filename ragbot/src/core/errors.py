"""
Ragbot - Exceptions
====================
Every error raised by the RAG pipeline derives from ``RAGError``.

``ValidationError``
    Malformed caller input.  Maps to HTTP 400, never retried.
``ProviderError``
    The embedding or generation service failed, timed out, or answered
    with something unusable.  Maps to HTTP 500 with a generic message.
``ProviderTimeoutError``
    The ``ProviderError`` raised when a call exceeds its deadline.
``DimensionMismatchError``
    Vectors of unequal length reached the ranker.  A configuration or
    programming error; fatal to the request.

A refused question (nothing relevant in the knowledge base) is *not*
an error and has no exception type.
"""


class RAGError(Exception):
    """Base class for all Ragbot pipeline errors."""


class ValidationError(RAGError):
    """The caller sent a query the pipeline cannot accept."""


class ProviderError(RAGError):
    """An upstream embedding / generation call failed."""

    def __init__(self, message: str, *, operation: str = "unknown") -> None:
        super().__init__(message)
        self.operation = operation


class ProviderTimeoutError(ProviderError):
    """An upstream call did not finish before its deadline."""


class DimensionMismatchError(RAGError):
    """Two vectors being compared have different lengths."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Vector dimension mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual
