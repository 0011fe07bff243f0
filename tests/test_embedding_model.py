"""Unit tests for EmbeddingModel class."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from unittest.mock import Mock, patch, MagicMock
import httpx
from services.embedding_model import EmbeddingModel
from services.errors import RetrievalError


def _ok_response(vector):
    response = Mock()
    response.status_code = 200
    response.json.return_value = {"data": [{"embedding": vector, "index": 0}]}
    return response


class TestEmbeddingModel:
    """Test suite for EmbeddingModel."""

    def test_initialization_success(self):
        """Test successful initialization with API key."""
        model = EmbeddingModel(api_key="test_key")
        assert model.api_key == "test_key"
        assert model.model_name == "text-embedding-3-small"
        assert model.dimension == 1536

    def test_initialization_without_api_key(self):
        """Test initialization fails without API key."""
        with pytest.raises(ValueError, match="EMBEDDING_API_KEY"):
            EmbeddingModel(api_key=None)

    def test_embed_text_empty_string(self):
        """Test embed_text raises error for empty string."""
        model = EmbeddingModel(api_key="test_key")

        with pytest.raises(ValueError, match="Text cannot be empty"):
            model.embed_text("")

        with pytest.raises(ValueError, match="Text cannot be empty"):
            model.embed_text("   ")

    @patch('httpx.Client')
    def test_embed_text_success(self, mock_client_class):
        """Test successful single text embedding."""
        mock_client = MagicMock()
        mock_client.post.return_value = _ok_response([0.1] * 1536)
        mock_client_class.return_value = mock_client

        model = EmbeddingModel(api_key="test_key")
        result = model.embed_text("What are macronutrients?")

        assert len(result) == 1536
        assert result[0] == 0.1

        call_kwargs = mock_client.post.call_args[1]
        assert call_kwargs["json"] == {
            "model": "text-embedding-3-small",
            "input": "What are macronutrients?"
        }
        assert call_kwargs["headers"]["Authorization"] == "Bearer test_key"

    @patch('httpx.Client')
    def test_dimension_mismatch(self, mock_client_class):
        """Test that a vector of the wrong length is rejected."""
        mock_client = MagicMock()
        mock_client.post.return_value = _ok_response([0.1, 0.2, 0.3])
        mock_client_class.return_value = mock_client

        model = EmbeddingModel(api_key="test_key")

        with pytest.raises(RetrievalError, match="expected 1536") as exc_info:
            model.embed_text("test text")
        assert exc_info.value.code == "EMBEDDING_DIMENSION_MISMATCH"

    @patch('httpx.Client')
    def test_custom_dimension(self, mock_client_class):
        """Test that the expected dimension is configurable."""
        mock_client = MagicMock()
        mock_client.post.return_value = _ok_response([0.1, 0.2, 0.3])
        mock_client_class.return_value = mock_client

        model = EmbeddingModel(api_key="test_key", dimension=3)

        assert model.embed_text("test text") == [0.1, 0.2, 0.3]

    @patch('httpx.Client')
    def test_api_error_status(self, mock_client_class):
        """Test handling of a non-200 response."""
        mock_response = Mock()
        mock_response.status_code = 401
        mock_response.text = "invalid api key"

        mock_client = MagicMock()
        mock_client.post.return_value = mock_response
        mock_client_class.return_value = mock_client

        model = EmbeddingModel(api_key="invalid_key")

        with pytest.raises(RetrievalError, match="status 401"):
            model.embed_text("test text")

    @patch('httpx.Client')
    def test_malformed_response(self, mock_client_class):
        """Test handling of a response without embedding data."""
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.return_value = {"data": []}

        mock_client = MagicMock()
        mock_client.post.return_value = mock_response
        mock_client_class.return_value = mock_client

        model = EmbeddingModel(api_key="test_key")

        with pytest.raises(RetrievalError, match="Unexpected embeddings response"):
            model.embed_text("test text")

    @patch('httpx.Client')
    def test_timeout_is_not_retried(self, mock_client_class):
        """Test that a timeout fails immediately without retrying."""
        mock_client = MagicMock()
        mock_client.post.side_effect = httpx.TimeoutException("Timeout")
        mock_client_class.return_value = mock_client

        model = EmbeddingModel(api_key="test_key")

        with pytest.raises(RetrievalError, match="timed out"):
            model.embed_text("test text")

        assert mock_client.post.call_count == 1

    @patch('httpx.Client')
    def test_network_error_is_not_retried(self, mock_client_class):
        """Test that a network error fails immediately without retrying."""
        mock_client = MagicMock()
        mock_client.post.side_effect = httpx.ConnectError("Network error")
        mock_client_class.return_value = mock_client

        model = EmbeddingModel(api_key="test_key")

        with pytest.raises(RetrievalError, match="Embedding request failed"):
            model.embed_text("test text")

        assert mock_client.post.call_count == 1

    def test_uses_injected_http_client(self):
        """Test that a provided httpx client is used for requests."""
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url == "https://embeddings.test/v1/embeddings"
            return httpx.Response(200, json={"data": [{"embedding": [0.5] * 4}]})

        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        model = EmbeddingModel(
            api_key="test_key",
            api_url="https://embeddings.test/v1/embeddings",
            dimension=4,
            http_client=http_client
        )

        assert model.embed_text("hello") == [0.5, 0.5, 0.5, 0.5]
