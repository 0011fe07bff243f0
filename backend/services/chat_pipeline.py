"""Query -> retrieval -> generation pipeline behind POST /chat."""
import logging
from dataclasses import dataclass
from typing import Any, List

from models.api import Source
from services.context_builder import build_context
from services.errors import ValidationError
from services.llm_client import LLMClient
from services.retrieval_engine import RetrievalEngine
from services.source_normalizer import normalize_sources

logger = logging.getLogger(__name__)

FALLBACK_ANSWER = (
    "I couldn't find anything in the document related to your question. "
    "Try rephrasing it or asking about another topic from the book."
)


@dataclass
class ChatResult:
    """Answer text plus the sources its [n] markers refer to."""
    answer: str
    sources: List[Source]


class ChatPipeline:
    """Run one chat request through every stage, sequentially and without retries."""

    def __init__(self, retrieval_engine: RetrievalEngine, llm_client: LLMClient):
        self.retrieval_engine = retrieval_engine
        self.llm_client = llm_client

    def answer(self, message: Any) -> ChatResult:
        """
        Answer a user message from the configured document.

        Steps:
        1. Trim the message; an empty one is rejected before any service call
        2. Embed and retrieve passages
        3. Build the numbered context; with no passages return FALLBACK_ANSWER
           and no sources without calling the model
        4. Generate the cited answer
        5. Normalize the same passages into sources

        Any stage failure propagates and aborts the request.

        Raises:
            ValidationError: Message is empty or whitespace-only
            RetrievalError: Embedding or vector store failure
            GenerationError: Model call failure
        """
        query = ("" if message is None else str(message)).strip()
        if not query:
            raise ValidationError("Empty query")

        logger.info(f"Processing query: {query[:100]}...")

        passages = self.retrieval_engine.retrieve(query)
        context = build_context(passages)

        if not context:
            logger.info("No context retrieved, returning fallback answer")
            return ChatResult(answer=FALLBACK_ANSWER, sources=[])

        llm_response = self.llm_client.generate(query, context)
        sources = normalize_sources(passages)

        return ChatResult(answer=llm_response.text, sources=sources)
