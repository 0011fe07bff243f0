"""Services for the Nutrition Assistant chat API."""
from .errors import ChatError, ValidationError, RetrievalError, GenerationError
from .embedding_model import EmbeddingModel
from .vector_store import VectorStore
from .retrieval_engine import RetrievalEngine
from .context_builder import build_context
from .llm_client import LLMClient, LLMResponse
from .source_normalizer import normalize_sources
from .chat_pipeline import ChatPipeline, ChatResult, FALLBACK_ANSWER

__all__ = ['ChatError', 'ValidationError', 'RetrievalError', 'GenerationError', 'EmbeddingModel', 'VectorStore', 'RetrievalEngine', 'build_context', 'LLMClient', 'LLMResponse', 'normalize_sources', 'ChatPipeline', 'ChatResult', 'FALLBACK_ANSWER']
