"""Query embedding through an OpenAI-compatible embeddings endpoint."""
import time
import logging
from typing import List, Optional
import httpx
from config import (
    EMBEDDING_API_KEY,
    EMBEDDING_API_URL,
    EMBEDDING_DIMENSION,
    EMBEDDING_MODEL,
    EMBEDDING_TIMEOUT,
)
from services.errors import RetrievalError

logger = logging.getLogger(__name__)


class EmbeddingModel:
    """Turn query text into a fixed-dimension embedding vector."""

    def __init__(
        self,
        api_key: Optional[str] = EMBEDDING_API_KEY,
        model_name: str = EMBEDDING_MODEL,
        api_url: str = EMBEDDING_API_URL,
        dimension: int = EMBEDDING_DIMENSION,
        timeout: float = EMBEDDING_TIMEOUT,
        http_client: Optional[httpx.Client] = None
    ):
        """
        Initialize the embedding client.

        Args:
            api_key: API key for the embeddings endpoint
            model_name: Embedding model identifier (default: text-embedding-3-small)
            api_url: Embeddings endpoint URL
            dimension: Expected vector length, must match the vector store column
            timeout: Request timeout in seconds
            http_client: Pre-built httpx client (mainly for tests)
        """
        if not api_key:
            raise ValueError("EMBEDDING_API_KEY (or OPENAI_API_KEY) environment variable is required")

        self.api_key = api_key
        self.model_name = model_name
        self.api_url = api_url
        self.dimension = dimension
        self.timeout = timeout
        self.client = http_client or httpx.Client(timeout=timeout)

        logger.info(f"Initialized EmbeddingModel with model: {model_name} ({dimension} dims)")

    def embed_text(self, text: str) -> List[float]:
        """
        Generate the embedding for a single query.

        There is no retry: the first failure aborts the request.

        Args:
            text: Trimmed, non-empty query text

        Returns:
            Embedding vector of length ``self.dimension``

        Raises:
            ValueError: If text is empty
            RetrievalError: If the request fails or the response is unusable
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        payload = {"model": self.model_name, "input": text}

        start_time = time.time()
        try:
            response = self.client.post(self.api_url, headers=headers, json=payload)
        except httpx.TimeoutException:
            raise RetrievalError(
                f"Embedding request timed out after {self.timeout}s",
                code="EMBEDDING_TIMEOUT",
                details={"model": self.model_name}
            )
        except httpx.RequestError as e:
            raise RetrievalError(
                f"Embedding request failed: {str(e)}",
                code="EMBEDDING_NETWORK_ERROR",
                details={"model": self.model_name}
            )

        elapsed = time.time() - start_time

        if response.status_code != 200:
            error_msg = f"Embedding request failed with status {response.status_code}: {response.text}"
            logger.error(error_msg)
            raise RetrievalError(
                error_msg,
                code="EMBEDDING_API_ERROR",
                details={"model": self.model_name, "status_code": response.status_code}
            )

        embedding = self._parse_embedding(response)
        logger.debug(f"Embedded query ({len(text)} chars) in {elapsed:.2f}s")
        return embedding

    def _parse_embedding(self, response: httpx.Response) -> List[float]:
        """Extract and validate the vector from an embeddings response."""
        try:
            data = response.json()
            embedding = data["data"][0]["embedding"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise RetrievalError(
                f"Unexpected embeddings response format: {str(e)}",
                code="EMBEDDING_BAD_RESPONSE",
                details={"model": self.model_name}
            )

        if not isinstance(embedding, list) or len(embedding) != self.dimension:
            length = len(embedding) if isinstance(embedding, list) else None
            raise RetrievalError(
                f"Embedding has dimension {length}, expected {self.dimension}",
                code="EMBEDDING_DIMENSION_MISMATCH",
                details={"model": self.model_name, "dimension": length}
            )

        return [float(x) for x in embedding]
