"""
Ragbot - Text Utilities
========================
Helper functions for cleaning knowledge-base text and splitting it
into paragraph-sized documents.

These utilities are consumed by ``load_knowledge_base`` and should
remain stateless and side-effect-free.
"""

from __future__ import annotations

import re
import unicodedata

# ── Non-printable character pattern ────────────────────────────────────
# Control characters (C0/C1) except \n, \r, \t, plus BOM, zero-width
# characters, soft hyphens and directional marks.
_NON_PRINTABLE_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ufeff\u200b\u200c\u200d\u200e\u200f\u00ad\u2060\ufffe]")

_BLANK_LINES_RE = re.compile(r"\n\s*\n")


def clean_text(text: str) -> str:
    """
    Sanitise raw document text for embedding.

    Steps:
        1. Unicode NFC normalisation, so accented characters have a
           single representation.
        2. Strip non-printable / zero-width characters.
        3. Collapse runs of horizontal whitespace into a single space,
           *preserving* newlines.
        4. Strip leading / trailing whitespace from every line.
        5. Collapse 3+ consecutive newlines to 2.

    Args:
        text: Raw text read from a source file.

    Returns:
        Cleaned, normalised text.
    """
    text = unicodedata.normalize("NFC", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _NON_PRINTABLE_RE.sub("", text)
    text = re.sub(r"[^\S\n]+", " ", text)
    lines = [line.strip() for line in text.splitlines()]
    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def split_paragraphs(text: str) -> list[str]:
    """
    Split cleaned text on blank lines.

    Lines inside a paragraph are joined with a single space; empty
    paragraphs are dropped.  Order is preserved.
    """
    paragraphs: list[str] = []
    for block in _BLANK_LINES_RE.split(text):
        joined = " ".join(line.strip() for line in block.splitlines() if line.strip())
        if joined:
            paragraphs.append(joined)
    return paragraphs
