"""
DocChat - Embedding Client
===========================
Thin wrapper around a LangChain embedding model.

• Fails fast on ``None`` / blank input with ``InvalidArgumentError``.
• Any failure from the model is re-raised as ``EmbeddingError`` with
  the original exception chained.  No retry, no partial result.
• The vector length is a property of the configured model and is not
  checked here.

Usage:
    from docchat.src.core.embedder import EmbeddingClient, build_embedding_model
    client = EmbeddingClient(build_embedding_model(settings), output_dimensionality=384)
    vector = client.embed("hello")
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from docchat.config.settings import Settings
from docchat.src.core.exceptions import EmbeddingError, InvalidArgumentError
from docchat.src.core.models import Vector
from docchat.src.utils.logger import get_logger

logger = get_logger(__name__)


# ── Embedder Protocol ─────────────────────────────────────────────────

@runtime_checkable
class Embedder(Protocol):
    """Structural type for any LangChain-compatible embedding model."""

    def embed_query(self, text: str, **kwargs) -> list[float]: ...


def build_embedding_model(settings: Settings) -> Embedder:
    """Initialise the Gemini embedding model via LangChain."""
    from langchain_google_genai import GoogleGenerativeAIEmbeddings

    model = GoogleGenerativeAIEmbeddings(model=settings.EMBEDDING_MODEL, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())
    logger.info("Embedding model initialised: %s", settings.EMBEDDING_MODEL)
    return model


class EmbeddingClient:
    """
    Produces one embedding vector per input text.

    Parameters
    ----------
    model
        Any object satisfying the ``Embedder`` protocol.
    output_dimensionality
        Forwarded to the model when set, so that it returns vectors of the
        collection's size.
    """

    __slots__ = ("_model", "_output_dimensionality")

    def __init__(self, model: Embedder, output_dimensionality: int | None = None) -> None:
        self._model = model
        self._output_dimensionality = output_dimensionality


    def embed(self, text: str | None) -> Vector:
        if text is None or not text.strip():
            raise InvalidArgumentError("text to embed must not be null/blank")

        try:
            if self._output_dimensionality is None:
                raw = self._model.embed_query(text)
            else:
                raw = self._model.embed_query(text, output_dimensionality=self._output_dimensionality)
            vector = [float(x) for x in raw]
        except Exception as exc:
            logger.error("Failed to generate embedding: %s", exc, exc_info=True)
            raise EmbeddingError("Failed to generate embedding") from exc

        logger.debug("Generated embedding with %d dimensions", len(vector))
        return vector
