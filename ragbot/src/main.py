"""
Ragbot - Application Entry Point
=================================
FastAPI application factory.  Registers the routes from
``ragbot.src.api.routes``, configures CORS and the JSON error
contract, and wires a ``RAGManager`` during the lifespan start-up.

Configuration (API key, models, thresholds) comes from
``ragbot.config.settings``, which also loads ``.env``.

Run:
    python -m ragbot.src.main
    uvicorn ragbot.src.main:app --reload
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ragbot.config.settings import settings
from ragbot.src.api.routes import GENERIC_FAILURE_MESSAGE, QUERY_REQUIRED_MESSAGE, router
from ragbot.src.core.rag_engine import RAGManager, build_rag_manager
from ragbot.src.utils.logger import get_logger

logger = get_logger(__name__)


def create_app(rag_manager: RAGManager | None = None, warmup: bool = False) -> FastAPI:
    """
    Build the FastAPI app.

    Parameters
    ----------
    rag_manager
        Pre-built manager (tests inject one with fake providers).  When
        *None*, one is built from settings at start-up.
    warmup
        Embed the knowledge base during start-up instead of on the
        first request.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "rag_manager", None) is None:
            app.state.rag_manager = build_rag_manager()
        if warmup:
            count = await app.state.rag_manager.warmup()
            logger.info("[API] Knowledge base warmed up (%d document(s)).", count)
        logger.info("[API] Ragbot ready (env=%s).", settings.ENV)
        yield

    app = FastAPI(title="Ragbot", description="Answers questions strictly from a fixed knowledge base.", lifespan=lifespan)
    app.state.rag_manager = rag_manager

    app.add_middleware(CORSMiddleware, allow_origins=settings.CORS_ORIGINS, allow_methods=["*"], allow_headers=["*"])

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("[API] Rejected request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": QUERY_REQUIRED_MESSAGE})

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("[API] Unhandled error on %s", request.url.path)
        return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE_MESSAGE})

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("ragbot.src.main:app", host=settings.HOST, port=settings.PORT)
