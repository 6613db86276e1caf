"""
docchat/src/main.py — Application Entry Point

Responsibility:
    This is the FastAPI application factory.  It builds the FastAPI instance,
    registers API route handlers from docchat/src/api/routes.py, maps the
    domain exceptions to HTTP status codes, and runs the startup hook.

    On startup the lifespan handler calls ``ChatOrchestrator.startup()``, which
    creates the Qdrant collection if needed.  A failure there is logged and the
    app keeps serving.

Related Files:
    - docchat/src/api/routes.py              → Route definitions mounted here
    - docchat/src/core/rag_engine.py         → Orchestrator built here
    - docchat/src/database/vector_store.py   → Collection initialised at startup
    - .env                                   → Settings loaded at startup
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from docchat.config.settings import Settings, get_settings
from docchat.src.api.routes import router
from docchat.src.core.exceptions import EmbeddingError, InvalidArgumentError, UnsupportedFormatError, VectorStoreError
from docchat.src.core.rag_engine import ChatOrchestrator, build_orchestrator
from docchat.src.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

# Domain exception → HTTP status
_STATUS_BY_ERROR: dict[type[Exception], int] = {
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    UnsupportedFormatError: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    EmbeddingError: status.HTTP_502_BAD_GATEWAY,
    VectorStoreError: status.HTTP_502_BAD_GATEWAY,
}


def create_app(orchestrator: ChatOrchestrator | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        orchestrator: Pre-built orchestrator (tests inject fakes here).
                      When *None*, one is wired from ``settings``.
        settings:     Explicit settings; defaults to ``get_settings()``.
    """
    if orchestrator is None:
        settings = settings or get_settings()
        orchestrator = build_orchestrator(settings)

    if settings is not None:
        configure_logging(settings.ENV)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.orchestrator.startup()
        yield
        app.state.orchestrator.vector_store.close()

    app = FastAPI(title="DocChat", lifespan=lifespan)
    app.state.orchestrator = orchestrator
    app.include_router(router)

    for error_type, status_code in _STATUS_BY_ERROR.items():
        app.add_exception_handler(error_type, _error_handler(status_code))

    return app


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        logger.warning("%s %s → %d: %s", request.method, request.url.path, status_code, exc)
        return JSONResponse(status_code=status_code, content={"error": type(exc).__name__, "detail": str(exc)})

    return handler


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
