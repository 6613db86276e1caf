"""
Shared test fixtures and fakes for pytest.
"""

import hashlib
import math
from typing import Optional

import pytest

from docchat.config.settings import Settings
from docchat.src.core.embedder import EmbeddingClient
from docchat.src.core.rag_engine import ChatOrchestrator
from docchat.src.database.vector_store import QdrantVectorStore

DIMENSIONS = 384
QDRANT_URL = "http://qdrant.test:6333"
COLLECTION = "test_docs"


# ============================================================================
# Fakes
# ============================================================================

class FakeEmbeddingModel:
    """Deterministic bag-of-words embedding: one bucket per hashed token."""

    def __init__(self, dimensions: int = DIMENSIONS):
        self.dimensions = dimensions
        self.calls = []

    def embed_query(self, text, **kwargs):
        self.calls.append((text, kwargs))
        size = kwargs.get("output_dimensionality") or self.dimensions
        vector = [0.0] * size
        for token in text.lower().split():
            bucket = int(hashlib.md5(token.strip(".?!,").encode("utf-8")).hexdigest(), 16) % size
            vector[bucket] += 1.0
        return vector


class FakeResponse:
    def __init__(self, status_code: int, body: Optional[dict] = None, text: Optional[str] = None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else ("" if body is None else str(body))

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


def _cosine(a, b):
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class FakeQdrantSession:
    """
    In-memory stand-in for ``requests.Session`` speaking the three Qdrant
    endpoints used by ``QdrantVectorStore``.
    """

    def __init__(self):
        self.headers = {}
        self.collections = {}
        self.requests = []
        self.closed = False
        self.fail_upsert_with: Optional[int] = None

    @staticmethod
    def _collection_of(url: str) -> str:
        return url.split("/collections/", 1)[1].split("/", 1)[0]

    def put(self, url, json=None, timeout=None):
        self.requests.append(("PUT", url, json))
        name = self._collection_of(url)

        if url.endswith("/points"):
            if self.fail_upsert_with is not None:
                return FakeResponse(self.fail_upsert_with, text="upsert rejected")
            if name not in self.collections:
                return FakeResponse(404, text="Collection not found")
            self.collections[name].extend(json["points"])
            return FakeResponse(200, {"result": {"status": "completed"}, "status": "ok"})

        if name in self.collections:
            return FakeResponse(409, text="Collection already exists")
        self.collections[name] = []
        return FakeResponse(200, {"result": True, "status": "ok"})

    def post(self, url, json=None, timeout=None):
        self.requests.append(("POST", url, json))
        name = self._collection_of(url)
        if name not in self.collections:
            return FakeResponse(404, text="Collection not found")

        scored = [
            {"id": p["id"], "score": _cosine(json["vector"], p["vector"]), "payload": p["payload"]}
            for p in self.collections[name]
        ]
        scored.sort(key=lambda hit: hit["score"], reverse=True)
        return FakeResponse(200, {"result": scored[: json["limit"]], "status": "ok"})

    def close(self):
        self.closed = True


class FakeChatModel:
    """Records the messages it receives and answers with a fixed string."""

    def __init__(self, answer: str = "The sky is blue."):
        self.answer = answer
        self.calls = []

    def invoke(self, messages):
        self.calls.append(messages)
        return type("AIMessage", (), {"content": self.answer})()


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Settings built explicitly, ignoring any local .env file."""
    return Settings(
        _env_file=None,
        QDRANT_URL=QDRANT_URL,
        QDRANT_COLLECTION_NAME=COLLECTION,
        GOOGLE_API_KEY="test-key-1234",
    )


@pytest.fixture
def embedding_model():
    return FakeEmbeddingModel()


@pytest.fixture
def embedding_client(embedding_model):
    return EmbeddingClient(embedding_model, output_dimensionality=DIMENSIONS)


@pytest.fixture
def qdrant_session():
    return FakeQdrantSession()


@pytest.fixture
def vector_store(qdrant_session):
    return QdrantVectorStore(QDRANT_URL, COLLECTION, session=qdrant_session)


@pytest.fixture
def chat_model():
    return FakeChatModel()


@pytest.fixture
def orchestrator(embedding_client, vector_store, chat_model):
    return ChatOrchestrator(embedding_client, vector_store, chat_model)
