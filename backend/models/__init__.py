"""Data models for the Nutrition Assistant chat API."""
from .passage import RetrievedPassage
from .api import ChatRequest, ChatResponse, ErrorResponse, Source

__all__ = [
    "RetrievedPassage",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "Source",
]
