"""Retrieval engine for orchestrating query embedding and passage search."""
import logging
from typing import Any, Dict, List
from models.passage import RetrievedPassage
from services.errors import RetrievalError
from services.vector_store import VectorStore
from services.embedding_model import EmbeddingModel
from config import MATCH_COUNT, DOCUMENT_SOURCE

logger = logging.getLogger(__name__)


class RetrievalEngine:
    """Embed a query and fetch the nearest passages from one configured document."""

    def __init__(
        self,
        vector_store: VectorStore,
        embedding_model: EmbeddingModel,
        match_count: int = MATCH_COUNT,
        document_source: str = DOCUMENT_SOURCE
    ):
        """
        Initialize the retrieval engine.

        Args:
            vector_store: VectorStore instance for similarity search
            embedding_model: EmbeddingModel instance for query embedding
            match_count: Number of passages requested from the store
            document_source: Source identifier the search is restricted to
        """
        self.vector_store = vector_store
        self.embedding_model = embedding_model
        self.match_count = match_count
        self.document_filter: Dict[str, Any] = {"source": document_source}
        logger.info(f"Initialized RetrievalEngine (match_count={match_count}, source={document_source})")

    def retrieve(self, query: str) -> List[RetrievedPassage]:
        """
        Retrieve passages for a query, similarity-descending.

        The store's order is returned untouched: no local threshold, re-sort
        or tie-break is applied.

        Args:
            query: Trimmed, non-empty user question

        Returns:
            Passages in store order, empty if nothing matched

        Raises:
            RetrievalError: If embedding or search fails
        """
        try:
            logger.debug(f"Embedding query: {query[:100]}...")
            query_embedding = self.embedding_model.embed_text(query)

            logger.debug(f"Searching for top {self.match_count} passages")
            passages = self.vector_store.search(
                query_embedding,
                match_count=self.match_count,
                document_filter=self.document_filter
            )
        except RetrievalError:
            raise
        except Exception as e:
            error_msg = f"Failed to retrieve passages for query: {str(e)}"
            logger.error(error_msg)
            raise RetrievalError(error_msg)

        if passages:
            logger.info(
                f"Retrieved {len(passages)} passages "
                f"(top similarity: {passages[0].numeric_similarity:.3f})"
            )
        else:
            logger.info("No passages found for query")
        return passages

    def describe(self) -> str:
        """Short description of the search scope, used by the health endpoint."""
        return f"{self.document_filter['source']} (top {self.match_count})"
