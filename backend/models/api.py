"""API request/response models."""
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator


class ChatRequest(BaseModel):
    """Body of POST /chat."""
    message: Optional[str] = ""

    @field_validator("message", mode="before")
    @classmethod
    def coerce_message(cls, value: Any) -> str:
        """Treat null as empty and stringify non-string values."""
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        return str(value)


class Source(BaseModel):
    """Normalized passage returned to the client."""
    id: str
    page: Optional[int] = None
    content: str
    similarity: float = 0.0
    index: int = Field(..., ge=1)


class ChatResponse(BaseModel):
    """Successful answer with the sources its citations refer to."""
    answer: str
    sources: List[Source]


class ErrorResponse(BaseModel):
    """Error body for 4xx/5xx responses."""
    error: str
