"""
docchat/src/api/routes.py — API Route Definitions

Responsibility:
    Defines the REST endpoints:
      - POST /documents/upload → Extract and index an uploaded file
      - POST /documents        → Index raw text
      - POST /chat             → Answer a query over the indexed documents
      - GET  /health           → Liveness check

    Each route handler is a thin controller: it validates the incoming request,
    delegates business logic to docchat/src/core/rag_engine.py, and formats the
    response.  Domain exceptions are translated to status codes by the handlers
    registered in docchat/src/main.py.

Related Files:
    - docchat/src/main.py           → Routes are registered here
    - docchat/src/core/rag_engine.py → Business logic invoked by route handlers
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from pydantic import BaseModel

from docchat.src.core.rag_engine import ChatOrchestrator

router = APIRouter()


# ── Request / response schemas ────────────────────────────────────────

class IndexTextRequest(BaseModel):
    text: str


class IndexResponse(BaseModel):
    status: str = "indexed"
    filename: str | None = None


class ChatRequest(BaseModel):
    query: str


class ChatResponse(BaseModel):
    answer: str


# ── Dependencies ──────────────────────────────────────────────────────

def get_orchestrator(request: Request) -> ChatOrchestrator:
    return request.app.state.orchestrator


# ── Routes ────────────────────────────────────────────────────────────

@router.post("/documents/upload", status_code=status.HTTP_201_CREATED, response_model=IndexResponse)
def upload_document(file: UploadFile = File(...), orchestrator: ChatOrchestrator = Depends(get_orchestrator)) -> IndexResponse:
    content = file.file.read()
    orchestrator.index_file(file.filename, content)
    return IndexResponse(filename=file.filename)


@router.post("/documents", status_code=status.HTTP_201_CREATED, response_model=IndexResponse)
def index_text(body: IndexTextRequest, orchestrator: ChatOrchestrator = Depends(get_orchestrator)) -> IndexResponse:
    orchestrator.index_document(body.text)
    return IndexResponse()


@router.post("/chat", response_model=ChatResponse)
def chat(body: ChatRequest, orchestrator: ChatOrchestrator = Depends(get_orchestrator)) -> ChatResponse:
    return ChatResponse(answer=orchestrator.query_and_chat(body.query))


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
