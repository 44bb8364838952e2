"""
Ragbot - Knowledge-Base Loader
===============================
Reads an optional on-disk knowledge base: read → clean → split.

Every ``.txt`` / ``.md`` file directly inside the directory is read in
filename order, normalised with ``clean_text`` and split into
paragraph documents.  Each paragraph becomes one knowledge-base entry.
Nothing is embedded or persisted here; ``KnowledgeBaseStore`` does the
embedding lazily.

Usage:
    from ragbot.src.core.ingestor import load_knowledge_base
    texts = load_knowledge_base(Path("data/knowledge"))
"""

from __future__ import annotations

import time
from pathlib import Path

from ragbot.config.knowledge_base import KNOWLEDGE_BASE
from ragbot.config.settings import settings
from ragbot.src.utils.logger import get_logger
from ragbot.src.utils.text_utils import clean_text, split_paragraphs

logger = get_logger(__name__)

# File extensions the loader knows how to read
_SUPPORTED_EXTENSIONS = {".txt", ".md"}


def load_knowledge_base(source_dir: Path) -> list[str]:
    """
    Load paragraph documents from every supported file in *source_dir*.

    Raises
    ------
    FileNotFoundError
        If *source_dir* does not exist or is not a directory.
    """
    source = Path(source_dir)
    if not source.is_dir():
        raise FileNotFoundError(f"Knowledge base directory not found: {source}")

    t_start = time.perf_counter()
    files = sorted(f for f in source.iterdir() if f.is_file() and f.suffix.lower() in _SUPPORTED_EXTENSIONS)
    if not files:
        logger.warning("No supported files found in %s", source)
        return []

    documents: list[str] = []
    for filepath in files:
        raw_text = filepath.read_text(encoding="utf-8")
        if not raw_text.strip():
            logger.warning("Skipping empty file: %s", filepath.name)
            continue
        paragraphs = split_paragraphs(clean_text(raw_text))
        logger.debug("Loaded %s → %d paragraph(s)", filepath.name, len(paragraphs))
        documents.extend(paragraphs)

    logger.info("Knowledge base loaded — %d document(s) from %d file(s) in %.1fms", len(documents), len(files), (time.perf_counter() - t_start) * 1000)
    return documents


def default_knowledge_base() -> list[str]:
    """``settings.KNOWLEDGE_BASE_DIR`` when configured, else the built-in entries."""
    if settings.KNOWLEDGE_BASE_DIR is not None:
        return load_knowledge_base(settings.KNOWLEDGE_BASE_DIR)
    return list(KNOWLEDGE_BASE)
