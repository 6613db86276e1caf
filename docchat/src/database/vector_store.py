"""
DocChat - QdrantVectorStore
=============================
Client for the three Qdrant HTTP operations this system needs:
  • Create the collection (384-dim, cosine); 200 and 409 both mean ready
  • Upsert one point per document (vector + metadata payload)
  • Similarity search returning payload ``content`` and ``score``

Design decisions:
  • **Explicit configuration**: base URL, collection name and timeouts
    come in through the constructor; nothing is read from globals.
  • **Injectable transport**: a ``requests.Session`` is created unless
    one is supplied, which lets tests substitute a fake.
  • **One round trip per call**: no batching and no retries.
  • **Search degrades gracefully**: ``search()`` never raises.  On any
    failure it logs a structured ``vector_search_fallback`` event and
    returns ``FALLBACK_SEARCH_RESULTS``.  ``search_hits()`` is the
    raising variant.

Usage:
    from docchat.src.database.vector_store import QdrantVectorStore
    store = QdrantVectorStore.from_settings(settings)
    store.initialize_collection()
    store.upsert("doc_1700000000000", vector, "The sky is blue.")
    lines = store.search(query_vector, limit=5)
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence

import requests

from docchat.config.prompt_templates import FALLBACK_SEARCH_RESULTS, PLACEHOLDER_CONTENT_TEMPLATE
from docchat.config.settings import Settings
from docchat.src.core.exceptions import StoreUnavailableError, StoreWriteError
from docchat.src.core.models import SearchHit, current_millis
from docchat.src.utils.logger import get_logger

logger = get_logger(__name__)

# ── Collection parameters ──────────────────────────────────────────────
VECTOR_SIZE = 384
DISTANCE = "Cosine"
DEFAULT_SEARCH_LIMIT = 5

# Type alias for a JSON request body
JsonBody = dict[str, object]


class QdrantVectorStore:
    """
    High-level abstraction over one Qdrant collection.

    Parameters
    ----------
    base_url
        Qdrant HTTP endpoint, e.g. ``http://localhost:6333``.
    collection_name
        Collection to create, write to and search.
    connect_timeout
        Seconds to wait for a TCP connection.
    read_timeout
        Seconds to wait for a response; ``None`` waits indefinitely.
    session
        Optional pre-built ``requests.Session`` (or compatible object).
    """

    __slots__ = ("_base_url", "_collection_name", "_timeout", "_session")

    def __init__(self, base_url: str, collection_name: str, connect_timeout: float = 10.0, read_timeout: float | None = None, session: requests.Session | None = None) -> None:
        self._base_url: str = base_url.rstrip("/")
        self._collection_name: str = collection_name
        self._timeout: tuple[float, float | None] = (connect_timeout, read_timeout)
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})


    @classmethod
    def from_settings(cls, settings: Settings, session: requests.Session | None = None) -> QdrantVectorStore:
        return cls(base_url=settings.QDRANT_URL, collection_name=settings.QDRANT_COLLECTION_NAME, connect_timeout=settings.QDRANT_CONNECT_TIMEOUT, read_timeout=settings.QDRANT_READ_TIMEOUT, session=session)


    @property
    def collection_name(self) -> str:
        return self._collection_name


    @property
    def collection_url(self) -> str:
        return f"{self._base_url}/collections/{self._collection_name}"

    # ══════════════════════════════════════════════════════════════════
    #  COLLECTION
    # ══════════════════════════════════════════════════════════════════

    def ensure_collection(self) -> None:
        """
        Create the collection, treating "already exists" as success.

        Raises
        ------
        StoreUnavailableError
            Any status other than 200 or 409, or the request never completed.
        """
        body: JsonBody = {"vectors": {"size": VECTOR_SIZE, "distance": DISTANCE}}
        try:
            response = self._session.put(self.collection_url, json=body, timeout=self._timeout)
        except requests.RequestException as exc:
            raise StoreUnavailableError(f"Qdrant unreachable at {self._base_url}: {exc}") from exc

        if response.status_code not in (200, 409):  # 409 = already exists
            raise StoreUnavailableError(f"Failed to create collection: {response.text}", status_code=response.status_code, body=response.text)


    def initialize_collection(self) -> bool:
        """
        Startup hook: ensure the collection exists without aborting startup.

        Returns
        -------
        bool
            ``True`` when the collection is ready, ``False`` when the failure
            was logged and swallowed.
        """
        try:
            self.ensure_collection()
        except Exception as exc:
            logger.warning("Failed to initialize Qdrant collection: %s", exc)
            return False

        logger.info("Qdrant collection '%s' initialized successfully at %s", self._collection_name, self._base_url)
        return True

    # ══════════════════════════════════════════════════════════════════
    #  WRITE
    # ══════════════════════════════════════════════════════════════════

    def upsert(self, document_id: str, vector: Sequence[float], content: str) -> None:
        """
        Store one point under a fresh UUID with ``document_id``, ``content``
        and an epoch-millisecond ``timestamp`` in its payload.

        Raises
        ------
        StoreWriteError
            Non-200 status, or the request never completed.
        """
        logger.info("Saving embedding to Qdrant - ID: %s (size: %d, content length: %d)", document_id, len(vector), len(content))

        point: JsonBody = {
            "id": str(uuid.uuid4()),
            "vector": [float(x) for x in vector],
            "payload": {"document_id": document_id, "content": content, "timestamp": current_millis()},
        }

        try:
            response = self._session.put(f"{self.collection_url}/points", json={"points": [point]}, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error("Failed to save embedding to Qdrant: %s", exc, exc_info=True)
            raise StoreWriteError("Failed to save embedding to Qdrant") from exc

        if response.status_code != 200:
            logger.error("Qdrant upsert failed (%d): %s", response.status_code, response.text)
            raise StoreWriteError(f"Qdrant upsert failed: {response.text}", status_code=response.status_code, body=response.text)

        logger.info("Successfully saved embedding to Qdrant: %s", document_id)


    def save_embedding(self, document_id: str, vector: Sequence[float]) -> None:
        """Upsert a vector whose source text is not available."""
        self.upsert(document_id, vector, PLACEHOLDER_CONTENT_TEMPLATE.format(document_id=document_id))


    def store_embedding(self, vector: Sequence[float]) -> str:
        """Upsert a bare vector under a generated ``embedding_<millis>`` id and return that id."""
        document_id = f"embedding_{current_millis()}"
        self.save_embedding(document_id, vector)
        return document_id

    # ══════════════════════════════════════════════════════════════════
    #  SEARCH
    # ══════════════════════════════════════════════════════════════════

    def search_hits(self, vector: Sequence[float], limit: int = DEFAULT_SEARCH_LIMIT) -> list[SearchHit]:
        """
        Nearest neighbours of ``vector``, best first.

        Raises
        ------
        StoreUnavailableError
            Non-200 status, a transport error, or a malformed response body.
        """
        body: JsonBody = {"vector": [float(x) for x in vector], "limit": limit, "with_payload": True}

        try:
            response = self._session.post(f"{self.collection_url}/points/search", json=body, timeout=self._timeout)
        except requests.RequestException as exc:
            raise StoreUnavailableError(f"Qdrant search request failed: {exc}") from exc

        if response.status_code != 200:
            raise StoreUnavailableError(f"Qdrant search failed: {response.text}", status_code=response.status_code, body=response.text)

        try:
            # A missing or null "result" means no neighbours
            hits = [_to_hit(item) for item in response.json().get("result") or []]
        except (ValueError, TypeError, AttributeError) as exc:
            raise StoreUnavailableError(f"Malformed Qdrant search response: {exc}", status_code=response.status_code, body=response.text) from exc

        return hits


    def search(self, vector: Sequence[float], limit: int = DEFAULT_SEARCH_LIMIT) -> list[str]:
        """
        Formatted neighbours (``"<content> (similarity: 0.123)"``).

        Never raises: on any failure the error is logged and the fixed
        ``FALLBACK_SEARCH_RESULTS`` are returned instead.
        """
        logger.info("Querying similar embeddings from Qdrant (limit=%d)", limit)
        try:
            hits = self.search_hits(vector, limit=limit)
        except Exception as exc:
            # TODO: product review whether callers should see this as an error instead of placeholder text.
            logger.error(
                "Failed to query Qdrant, returning fallback content: %s", exc,
                exc_info=True,
                extra={"event": "vector_search_fallback", "collection": self._collection_name, "reason": type(exc).__name__},
            )
            return list(FALLBACK_SEARCH_RESULTS)

        logger.info("Found %d similar documents from Qdrant", len(hits))
        return [hit.format() for hit in hits]

    # ══════════════════════════════════════════════════════════════════
    #  LIFECYCLE
    # ══════════════════════════════════════════════════════════════════

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._session.close()


    def __repr__(self) -> str:
        return f"QdrantVectorStore(url='{self._base_url}', collection='{self._collection_name}')"


def _to_hit(item: dict) -> SearchHit:
    """One Qdrant search hit; a missing or null payload, content or score reads as ``""`` / ``0.0``."""
    payload = item.get("payload") or {}
    content = payload.get("content")
    score = item.get("score")
    return SearchHit(content="" if content is None else str(content), score=0.0 if score is None else float(score))
