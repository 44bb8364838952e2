"""
Ragbot - Retrieval Primitives
==============================
Pure functions that turn embeddings into a go / no-go decision and a
context block.  No I/O, no provider calls.

``cosine_similarity``
    ``dot(a, b) / (|a| * |b|)``, defined as ``0.0`` when either vector
    has zero magnitude, clipped to ``[-1, 1]``.
``rank``
    Scores every candidate against the query and sorts by similarity,
    descending.  Ties keep candidate order (stable sort), so the same
    inputs always produce the same ranking.
``is_relevant``
    Hard gate: the *best* score among the top-K must reach the
    threshold (inclusive).  Lower-ranked matches never influence it.
``assemble_context``
    Joins the content of the selected matches, in rank order, with a
    blank line between them.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from ragbot.config.prompt_templates import CONTEXT_SEPARATOR
from ragbot.src.core.errors import DimensionMismatchError

# ── Type aliases ───────────────────────────────────────────────────────
Vector = Sequence[float]
Candidate = tuple[str, Vector]

DEFAULT_TOP_K = 3
DEFAULT_THRESHOLD = 0.75


@dataclass(frozen=True)
class Document:
    """A knowledge-base entry; ``embedding`` is filled in once, lazily."""

    content: str
    embedding: tuple[float, ...] | None = None

    @property
    def is_embedded(self) -> bool:
        return self.embedding is not None

    def with_embedding(self, vector: Vector) -> Document:
        return Document(content=self.content, embedding=tuple(float(x) for x in vector))


@dataclass(frozen=True)
class RankedMatch:
    content: str
    similarity: float


# ══════════════════════════════════════════════════════════════════════
#  SIMILARITY
# ══════════════════════════════════════════════════════════════════════


def _cosine_scores(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """Row-wise cosine of *matrix* against *query*; zero-norm rows score 0."""
    dots = matrix @ query
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    scores = np.divide(dots, norms, out=np.zeros_like(dots), where=norms > 0)
    return np.clip(scores, -1.0, 1.0)


def cosine_similarity(a: Vector, b: Vector) -> float:
    """Cosine similarity of two equal-length vectors."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise DimensionMismatchError(expected=va.size, actual=vb.size)
    return float(_cosine_scores(vb.reshape(1, -1), va)[0])


def rank(query_vector: Vector, candidates: Sequence[Candidate]) -> list[RankedMatch]:
    """
    Rank *candidates* against *query_vector* by cosine similarity.

    Parameters
    ----------
    query_vector
        The embedded question.
    candidates
        ``(content, vector)`` pairs, typically the knowledge base.

    Returns
    -------
    list[RankedMatch]
        One entry per candidate, highest similarity first, ties in
        original candidate order.  Empty when there are no candidates.

    Raises
    ------
    DimensionMismatchError
        If any candidate vector's length differs from the query's.
    """
    if not candidates:
        return []

    query = np.asarray(query_vector, dtype=np.float64)
    dimension = query.size
    for _, vector in candidates:
        if len(vector) != dimension:
            raise DimensionMismatchError(expected=dimension, actual=len(vector))

    matrix = np.asarray([vector for _, vector in candidates], dtype=np.float64).reshape(len(candidates), dimension)

    scores = _cosine_scores(matrix, query)
    order = np.argsort(-scores, kind="stable")
    return [RankedMatch(content=candidates[i][0], similarity=float(scores[i])) for i in order]


# ══════════════════════════════════════════════════════════════════════
#  GATE & CONTEXT
# ══════════════════════════════════════════════════════════════════════


def top_matches(ranked: Sequence[RankedMatch], top_k: int = DEFAULT_TOP_K) -> list[RankedMatch]:
    if top_k < 1:
        raise ValueError(f"top_k must be ≥ 1, got {top_k}")
    return list(ranked[:top_k])


def is_relevant(ranked: Sequence[RankedMatch], top_k: int = DEFAULT_TOP_K, threshold: float = DEFAULT_THRESHOLD) -> bool:
    """
    Decide whether the ranking contains enough to answer from.

    True iff the top-*top_k* slice is non-empty and its best similarity
    is ``>= threshold``.
    """
    top = top_matches(ranked, top_k)
    return bool(top) and max(match.similarity for match in top) >= threshold


def assemble_context(matches: Sequence[RankedMatch]) -> str:
    """Concatenate match contents in rank order, blank-line separated."""
    return CONTEXT_SEPARATOR.join(match.content for match in matches)
