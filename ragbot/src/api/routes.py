"""
Ragbot - API Route Definitions
===============================
Thin controllers: validate the request, delegate to ``RAGManager``,
format the response.  No retrieval logic lives here.

Routes
------
POST /api/rag-gemini     → answer one question from the knowledge base
GET  /api/languages      → supported languages for the language picker
GET  /api/ui-text        → UI labels for one language (English fallback)
GET  /health             → liveness + knowledge-base status

Error bodies are always ``{"error": "<generic message>"}``; details are
logged server-side only.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ragbot.config.languages import LANGUAGES, get_ui_text, resolve_language
from ragbot.src.api.schemas import ChatRequest, ChatResponse, ErrorResponse, HealthResponse, LanguageInfo, UITextResponse
from ragbot.src.core.errors import ValidationError
from ragbot.src.core.rag_engine import RAGManager
from ragbot.src.utils.logger import get_logger

logger = get_logger(__name__)

QUERY_REQUIRED_MESSAGE = "Query string is required"
GENERIC_FAILURE_MESSAGE = "Failed to process the request"

router = APIRouter()


def get_rag_manager(request: Request) -> RAGManager:
    return request.app.state.rag_manager


@router.post("/api/rag-gemini", response_model=ChatResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def ask(payload: ChatRequest, rag: RAGManager = Depends(get_rag_manager)) -> ChatResponse | JSONResponse:
    try:
        text = await rag.answer(payload.query, payload.language)
    except ValidationError:
        return JSONResponse(status_code=400, content={"error": QUERY_REQUIRED_MESSAGE})
    except Exception:
        logger.exception("[API] RAG request failed.")
        return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE_MESSAGE})
    return ChatResponse(text=text)


@router.get("/api/languages", response_model=list[LanguageInfo])
async def list_languages() -> list[LanguageInfo]:
    return [LanguageInfo(code=code, name=name) for code, name in LANGUAGES.items()]


@router.get("/api/ui-text", response_model=UITextResponse)
async def ui_text(language: str | None = None) -> UITextResponse:
    resolved = resolve_language(language)
    return UITextResponse(language=resolved, text=get_ui_text(resolved))


@router.get("/health", response_model=HealthResponse)
async def health(rag: RAGManager = Depends(get_rag_manager)) -> HealthResponse:
    return HealthResponse(documents=rag.store.count(), embedded=rag.store.is_embedded)
