"""
DocChat - RAG Engine
=====================
Composes the extractor, embedding client, vector store and chat model.

``ChatOrchestrator``
    Stateless pipeline orchestrator.  Index flow:
        1. (file) Extract text
        2. Embed text
        3. Generate ``doc_<millis>`` id
        4. Upsert into the vector store
    Query flow:
        1. Embed query
        2. Search (fixed limit)
        3. Join neighbours into a context block
        4. Build augmented prompt
        5. Call the chat model with the system preamble
        6. Return the answer verbatim

Failures from extraction, embedding, upsert and the chat model
propagate unchanged.  The only recovery happens inside the vector
store's ``search`` (fallback content) and ``initialize_collection``.

Usage:
    from docchat.src.core.rag_engine import build_orchestrator
    rag = build_orchestrator(settings)
    rag.startup()
    rag.index_document("The sky is blue.")
    answer = rag.query_and_chat("What color is the sky?")
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from docchat.config.prompt_templates import CONTEXT_SEPARATOR, RAG_PROMPT_TEMPLATE, SYSTEM_PROMPT
from docchat.config.settings import Settings
from docchat.src.core.embedder import EmbeddingClient, build_embedding_model
from docchat.src.core.models import Document
from docchat.src.core.text_extractor import extract_text
from docchat.src.database.vector_store import DEFAULT_SEARCH_LIMIT, QdrantVectorStore
from docchat.src.utils.logger import get_logger

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  CHAT MODEL PROTOCOL
# ══════════════════════════════════════════════════════════════════════


@runtime_checkable
class ChatModel(Protocol):
    """Anything with LangChain's ``invoke(messages)`` chat interface."""

    def invoke(self, input: list[BaseMessage]) -> object: ...


def build_chat_model(settings: Settings) -> ChatModel:
    """Initialise the Gemini chat model via LangChain."""
    from langchain_google_genai import ChatGoogleGenerativeAI

    llm = ChatGoogleGenerativeAI(model=settings.LLM_MODEL, temperature=settings.LLM_TEMPERATURE, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())
    logger.info("LLM initialised: %s (temperature=%.1f)", settings.LLM_MODEL, settings.LLM_TEMPERATURE)
    return llm


# ══════════════════════════════════════════════════════════════════════
#  ORCHESTRATOR
# ══════════════════════════════════════════════════════════════════════


class ChatOrchestrator:
    """
    Index documents and answer questions over them.

    Parameters
    ----------
    embedding_client
        Produces vectors for documents and queries.
    vector_store
        A ``QdrantVectorStore`` (or compatible) for upsert and search.
    llm
        A ``ChatModel`` used for answer generation.
    search_limit
        Neighbours fetched per query.
    system_prompt
        Preamble sent as the system message on every call.
    """

    __slots__ = ("_embedder", "_store", "_llm", "_search_limit", "_system_prompt")

    def __init__(self, embedding_client: EmbeddingClient, vector_store: QdrantVectorStore, llm: ChatModel, search_limit: int = DEFAULT_SEARCH_LIMIT, system_prompt: str = SYSTEM_PROMPT) -> None:
        self._embedder = embedding_client
        self._store = vector_store
        self._llm = llm
        self._search_limit = search_limit
        self._system_prompt = system_prompt


    @property
    def vector_store(self) -> QdrantVectorStore:
        return self._store


    def startup(self) -> bool:
        """Ensure the collection exists; a failure is logged, not raised."""
        return self._store.initialize_collection()

    # ══════════════════════════════════════════════════════════════════
    #  INDEXING
    # ══════════════════════════════════════════════════════════════════

    def index_file(self, filename: str | None, content: bytes) -> None:
        """Extract the text of an uploaded file and index it."""
        text = extract_text(filename, content)
        logger.info("[INDEX] Extracted %d chars from %s", len(text), filename)
        self.index_document(text)


    def index_document(self, text: str) -> None:
        """Embed ``text`` and upsert it under a fresh ``doc_<millis>`` id."""
        t_start = time.perf_counter()

        vector = self._embedder.embed(text)
        document = Document.from_text(text)
        self._store.upsert(document.document_id, vector, document.content)

        elapsed_ms = (time.perf_counter() - t_start) * 1000
        logger.info("[INDEX] Indexed %s in %.1fms", document.document_id, elapsed_ms)

    # ══════════════════════════════════════════════════════════════════
    #  QUERY
    # ══════════════════════════════════════════════════════════════════

    def query_and_chat(self, query: str) -> str:
        """Answer ``query`` using the nearest stored documents as context."""
        t_start = time.perf_counter()

        similar = self.retrieve_context(query)
        retrieve_ms = (time.perf_counter() - t_start) * 1000

        answer = self.answer(query, similar)

        total_ms = (time.perf_counter() - t_start) * 1000
        logger.info("[RAG] Pipeline total: %.1fms (retrieve=%.1f, %d chars)", total_ms, retrieve_ms, len(answer))
        return answer


    def answer(self, query: str, context_lines: list[str]) -> str:
        """Ask the chat model about ``query`` given already-retrieved ``context_lines``."""
        prompt = self.build_prompt(query, context_lines)
        messages = [SystemMessage(content=self._system_prompt), HumanMessage(content=prompt)]

        t_llm = time.perf_counter()
        response_obj = self._llm.invoke(messages)
        answer = response_obj.content if hasattr(response_obj, "content") else str(response_obj)
        logger.info("[RAG] LLM answered in %.1fms", (time.perf_counter() - t_llm) * 1000)
        return answer


    def retrieve_context(self, query: str) -> list[str]:
        """Embed ``query`` and return the formatted nearest neighbours."""
        query_vector = self._embedder.embed(query)
        similar = self._store.search(query_vector, limit=self._search_limit)
        logger.info("[RAG] Retrieved %d context line(s)", len(similar))
        return similar


    @staticmethod
    def build_prompt(query: str, context_lines: list[str]) -> str:
        """Join ``context_lines`` into a context block ahead of the query."""
        context = CONTEXT_SEPARATOR.join(context_lines)
        return RAG_PROMPT_TEMPLATE.format(context=context, query=query)


# ══════════════════════════════════════════════════════════════════════
#  WIRING
# ══════════════════════════════════════════════════════════════════════


def build_orchestrator(settings: Settings) -> ChatOrchestrator:
    """Build an orchestrator backed by Gemini and the configured Qdrant collection."""
    embedding_client = EmbeddingClient(build_embedding_model(settings), output_dimensionality=settings.EMBEDDING_DIMENSIONS)
    store = QdrantVectorStore.from_settings(settings)
    return ChatOrchestrator(embedding_client, store, build_chat_model(settings), search_limit=settings.SEARCH_RESULTS_LIMIT)
