"""
Unit tests for the embedding client.
"""

from unittest.mock import MagicMock

import pytest

from docchat.src.core.embedder import Embedder, EmbeddingClient
from docchat.src.core.exceptions import EmbeddingError, InvalidArgumentError


class TestEmbeddingClient:
    """Tests for EmbeddingClient."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    def test_blank_input_rejected(self, embedding_client, embedding_model, text):
        """Test blank or missing text fails fast without calling the model."""
        with pytest.raises(InvalidArgumentError):
            embedding_client.embed(text)

        assert embedding_model.calls == []

    def test_vector_length(self, embedding_client):
        """Test a configured 384-dim model yields 384 floats."""
        vector = embedding_client.embed("hello")

        assert len(vector) == 384
        assert all(isinstance(x, float) for x in vector)

    def test_output_dimensionality_forwarded(self, embedding_client, embedding_model):
        """Test the requested dimensionality reaches the model."""
        embedding_client.embed("hello")

        assert embedding_model.calls == [("hello", {"output_dimensionality": 384})]

    def test_no_dimensionality_kwarg_when_unset(self):
        """Test the model is called with the text only when no size is configured."""
        model = MagicMock()
        model.embed_query.return_value = [0.1, 0.2]

        vector = EmbeddingClient(model).embed("hello")

        model.embed_query.assert_called_once_with("hello")
        assert vector == [0.1, 0.2]

    def test_model_failure_wrapped(self):
        """Test model errors become EmbeddingError with the cause chained."""
        model = MagicMock()
        cause = RuntimeError("quota exceeded")
        model.embed_query.side_effect = cause

        with pytest.raises(EmbeddingError) as exc_info:
            EmbeddingClient(model).embed("hello")

        assert exc_info.value.__cause__ is cause

    def test_fake_model_satisfies_protocol(self, embedding_model):
        """Test the fake used across the suite matches the Embedder protocol."""
        assert isinstance(embedding_model, Embedder)
