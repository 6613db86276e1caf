"""
Unit tests for the chat orchestrator.

Tests for:
- Index flow (text and file)
- Query flow, prompt construction and system preamble
- Error propagation
"""

from unittest.mock import MagicMock

import pytest
from langchain_core.messages import HumanMessage, SystemMessage

from docchat.config.prompt_templates import FALLBACK_SEARCH_RESULTS
from docchat.src.core.exceptions import EmbeddingError, InvalidArgumentError, StoreWriteError, UnsupportedFormatError
from docchat.src.core.rag_engine import ChatOrchestrator

from conftest import COLLECTION


@pytest.fixture
def stub_store():
    """A vector store double whose search returns plain sentences."""
    store = MagicMock()
    store.search.return_value = ["The sky is blue."]
    return store


@pytest.fixture
def stub_orchestrator(embedding_client, stub_store, chat_model):
    return ChatOrchestrator(embedding_client, stub_store, chat_model)


class TestIndexing:
    """Tests for index_document / index_file."""

    def test_index_text_upserts_one_point(self, orchestrator, qdrant_session):
        """Test indexing sends exactly one upsert carrying the original text."""
        orchestrator.startup()

        result = orchestrator.index_document("The sky is blue.")

        assert result is None
        upserts = [r for r in qdrant_session.requests if r[0] == "PUT" and r[1].endswith("/points")]
        assert len(upserts) == 1
        payload = upserts[0][2]["points"][0]["payload"]
        assert payload["content"] == "The sky is blue."
        assert payload["document_id"].startswith("doc_")
        assert payload["document_id"][len("doc_"):].isdigit()
        assert len(qdrant_session.collections[COLLECTION]) == 1

    def test_index_file_extracts_then_indexes(self, stub_orchestrator, stub_store):
        """Test the upload path stores the extracted text."""
        stub_orchestrator.index_file("notes.txt", b"Plain notes.")

        document_id, vector, content = stub_store.upsert.call_args[0]
        assert content == "Plain notes."
        assert len(vector) == 384

    def test_index_file_unsupported(self, stub_orchestrator, stub_store):
        """Test extraction failures propagate before anything is stored."""
        with pytest.raises(UnsupportedFormatError):
            stub_orchestrator.index_file("legacy.doc", b"...")

        stub_store.upsert.assert_not_called()

    def test_blank_text_propagates(self, stub_orchestrator, stub_store):
        """Test embedding validation errors reach the caller."""
        with pytest.raises(InvalidArgumentError):
            stub_orchestrator.index_document("   ")

        stub_store.upsert.assert_not_called()

    def test_embedding_failure_propagates(self, stub_store, chat_model):
        """Test embedder failures are not caught by the orchestrator."""
        embedder = MagicMock()
        embedder.embed.side_effect = EmbeddingError("model down")
        rag = ChatOrchestrator(embedder, stub_store, chat_model)

        with pytest.raises(EmbeddingError):
            rag.index_document("text")

    def test_store_failure_propagates(self, orchestrator, qdrant_session):
        """Test a rejected upsert reaches the caller."""
        orchestrator.startup()
        qdrant_session.fail_upsert_with = 500

        with pytest.raises(StoreWriteError):
            orchestrator.index_document("The sky is blue.")


class TestQuery:
    """Tests for query_and_chat."""

    def test_prompt_and_system_preamble(self, stub_orchestrator, stub_store, chat_model):
        """Test the sky scenario produces the exact augmented prompt."""
        answer = stub_orchestrator.query_and_chat("What color is the sky?")

        assert answer == "The sky is blue."
        system, human = chat_model.calls[0]
        assert isinstance(system, SystemMessage)
        assert system.content == "You are a helpful AI assistant for document queries."
        assert isinstance(human, HumanMessage)
        assert human.content == "Context:\nThe sky is blue.\n\nQuery:\nWhat color is the sky?"
        assert stub_store.search.call_args.kwargs["limit"] == 5

    def test_context_lines_joined_with_newlines(self):
        """Test multiple context lines become one newline-separated block."""
        prompt = ChatOrchestrator.build_prompt("q?", ["a (similarity: 0.900)", "b (similarity: 0.800)"])

        assert prompt == "Context:\na (similarity: 0.900)\nb (similarity: 0.800)\n\nQuery:\nq?"

    def test_end_to_end_with_fake_store(self, orchestrator, chat_model):
        """Test an indexed sentence shows up in the context sent to the model."""
        orchestrator.startup()
        orchestrator.index_document("The sky is blue.")

        orchestrator.query_and_chat("What color is the sky?")

        human = chat_model.calls[0][1]
        assert human.content.startswith("Context:\nThe sky is blue. (similarity: ")
        assert human.content.endswith("\n\nQuery:\nWhat color is the sky?")

    def test_store_outage_uses_fallback_context(self, orchestrator, chat_model):
        """Test a missing collection degrades to the fallback context instead of failing."""
        orchestrator.query_and_chat("What color is the sky?")

        human = chat_model.calls[0][1]
        assert human.content == ChatOrchestrator.build_prompt("What color is the sky?", list(FALLBACK_SEARCH_RESULTS))

    def test_chat_model_failure_propagates(self, embedding_client, stub_store):
        """Test chat model errors are not caught locally."""
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("LLM unavailable")
        rag = ChatOrchestrator(embedding_client, stub_store, llm)

        with pytest.raises(RuntimeError, match="LLM unavailable"):
            rag.query_and_chat("question")

    def test_blank_query_rejected(self, stub_orchestrator, chat_model):
        """Test a blank query fails before any model call."""
        with pytest.raises(InvalidArgumentError):
            stub_orchestrator.query_and_chat("")

        assert chat_model.calls == []

    def test_answer_uses_given_context_without_searching(self, stub_orchestrator, stub_store, chat_model):
        """Test answering from already-retrieved context skips the store."""
        answer = stub_orchestrator.answer("q?", ["a (similarity: 0.900)"])

        assert answer == "The sky is blue."
        stub_store.search.assert_not_called()
        assert chat_model.calls[0][1].content == "Context:\na (similarity: 0.900)\n\nQuery:\nq?"

    def test_calls_are_stateless(self, stub_orchestrator, chat_model):
        """Test each query sends only its own prompt."""
        stub_orchestrator.query_and_chat("first?")
        stub_orchestrator.query_and_chat("second?")

        assert len(chat_model.calls[1]) == 2
        assert chat_model.calls[1][1].content.endswith("Query:\nsecond?")


class TestStartup:
    """Tests for startup."""

    def test_existing_collection(self, orchestrator, qdrant_session):
        """Test startup succeeds when the collection already exists (409)."""
        qdrant_session.collections[COLLECTION] = []

        assert orchestrator.startup() is True
