"""Vector store search using Supabase pgvector."""
import logging
from typing import Any, Dict, List, Optional
from supabase import create_client, Client
from models.passage import RetrievedPassage
from services.errors import RetrievalError
from config import SUPABASE_URL, SUPABASE_KEY, MATCH_FUNCTION

logger = logging.getLogger(__name__)


class VectorStore:
    """Similarity search over ingested document chunks in Supabase pgvector."""

    def __init__(
        self,
        supabase_url: Optional[str] = SUPABASE_URL,
        supabase_key: Optional[str] = SUPABASE_KEY,
        match_function: str = MATCH_FUNCTION
    ):
        """
        Initialize the vector store with Supabase client.

        Args:
            supabase_url: Supabase project URL
            supabase_key: Supabase service role key (server-side only)
            match_function: Name of the RPC performing the similarity search

        Raises:
            ValueError: If Supabase credentials are missing
        """
        if not supabase_url or not supabase_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY environment variables are required")

        self.match_function = match_function

        # Initialize Supabase client
        self.client: Client = create_client(supabase_url, supabase_key)

        logger.info(f"Initialized VectorStore with RPC: {match_function}")

    def search(
        self,
        query_embedding: List[float],
        match_count: int,
        document_filter: Dict[str, Any]
    ) -> List[RetrievedPassage]:
        """
        Find the chunks most similar to the query embedding.

        The RPC is expected to look like:
            match_documents(query_embedding vector(1536), match_count int, filter jsonb)
            RETURNS TABLE (id bigint, content text, metadata jsonb, similarity float)
        ordered by cosine similarity, highest first. Rows are returned in that
        order; any relevance threshold is applied by the RPC itself.

        Args:
            query_embedding: Embedding vector for the user query
            match_count: Maximum number of passages to return
            document_filter: Metadata filter, e.g. {"source": "book.pdf"}

        Returns:
            Passages in the order the store returned them, possibly empty

        Raises:
            ValueError: If query_embedding is empty or match_count is invalid
            RetrievalError: If the RPC call fails
        """
        if not query_embedding:
            raise ValueError("Query embedding cannot be empty")

        if match_count <= 0:
            raise ValueError("match_count must be positive")

        try:
            response = self.client.rpc(
                self.match_function,
                {
                    "query_embedding": query_embedding,
                    "match_count": match_count,
                    "filter": document_filter
                }
            ).execute()
        except Exception as e:
            error_msg = f"Failed to search vector store: {str(e)}"
            logger.error(error_msg)
            raise RetrievalError(error_msg, code="VECTOR_STORE_ERROR")

        passages = [self._to_passage(row) for row in (response.data or [])]
        logger.debug(f"Found {len(passages)} passages for query")
        return passages

    @staticmethod
    def _to_passage(row: Dict[str, Any]) -> RetrievedPassage:
        metadata = row.get("metadata")
        return RetrievedPassage(
            content=row.get("content") or "",
            similarity=row.get("similarity"),
            metadata=metadata if isinstance(metadata, dict) else {},
            chunk_index=row.get("chunk_index")
        )
