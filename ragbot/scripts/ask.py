"""
Ragbot - Ask From the Terminal
===============================
CLI entry point that runs one question through the RAG pipeline:
    1. Load settings (fail-fast when ``GOOGLE_API_KEY`` is missing).
    2. Build the ``RAGManager`` (Gemini embedder + LLM, knowledge base).
    3. Optionally embed the knowledge base up-front (``--warmup``).
    4. Print the answer, or the localized refusal.

Flags:
    --language   Two-letter answer language (default: settings.DEFAULT_LANGUAGE).
    --warmup     Embed the knowledge base before asking and report timing.
    --log-level  Override the log level for this run (DEBUG, INFO, WARNING, ERROR).

Usage:
    python -m ragbot.scripts.ask "¿Qué idiomas hablas?"
    python -m ragbot.scripts.ask "What languages do you speak?" --language en
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="ask", description="Ragbot — Ask one question against the knowledge base.")
    parser.add_argument("query", help="The question to ask.")
    parser.add_argument("--language", default=None, help="Two-letter answer language code.")
    parser.add_argument("--warmup", action="store_true", default=False, help="Embed the knowledge base before asking.")
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"], type=str.upper, help="Log level for this run.")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    from ragbot.src.core.errors import RAGError, ValidationError
    from ragbot.src.core.rag_engine import build_rag_manager
    from ragbot.src.utils.logger import get_logger, set_log_level

    if args.log_level:
        set_log_level(args.log_level)
    logger = get_logger(__name__)
    rag = build_rag_manager()

    try:
        if args.warmup:
            t_warm = time.perf_counter()
            count = await rag.warmup()
            logger.info("Knowledge base embedded: %d document(s) in %.1fms", count, (time.perf_counter() - t_warm) * 1000)
        answer = await rag.answer(args.query, args.language)
    except ValidationError as exc:
        print(f"\n[ERROR] {exc}\n", file=sys.stderr)
        return 1
    except RAGError:
        logger.exception("Request failed.")
        return 1

    print()
    print(answer)
    print()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    try:
        from ragbot.config.settings import settings  # noqa: F401
    except Exception as exc:
        print("\n[FATAL] Configuration error — check your .env file:\n", file=sys.stderr)
        print(f"  {exc}\n", file=sys.stderr)
        return 1

    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
