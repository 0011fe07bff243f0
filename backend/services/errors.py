"""Error taxonomy for the chat pipeline."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ErrorInfo:
    """Structured error information attached to a ChatError."""
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class ChatError(Exception):
    """Base class for failures that abort a chat request."""

    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error = ErrorInfo(
            code=code or self.default_code,
            message=message,
            details=details or {}
        )
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def details(self) -> Dict[str, Any]:
        return self.error.details


class ValidationError(ChatError):
    """The incoming message is empty after trimming."""

    status_code = 400
    default_code = "VALIDATION_ERROR"


class RetrievalError(ChatError):
    """Query embedding or vector store search failed."""

    default_code = "RETRIEVAL_ERROR"


class GenerationError(ChatError):
    """The generative model call failed."""

    default_code = "GENERATION_ERROR"
