"""Retrieved passage data model."""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class RetrievedPassage:
    """A passage returned by the vector store, in similarity-descending order.

    ``similarity`` is kept exactly as the store returned it; callers that need
    a number go through ``numeric_similarity``. ``metadata`` is the opaque
    key-value map stored alongside the chunk. Only its ``page`` key is read.
    """
    content: str
    similarity: Any
    metadata: Dict[str, Any] = field(default_factory=dict)
    chunk_index: Optional[int] = None

    @property
    def page(self) -> Optional[int]:
        """Page number from metadata, or None if absent or not an integral number."""
        value = self.metadata.get("page") if isinstance(self.metadata, dict) else None
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return None

    @property
    def numeric_similarity(self) -> float:
        """Similarity as a float, 0.0 when the store value is not a finite number."""
        value = self.similarity
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0.0
        if not math.isfinite(value):
            return 0.0
        return float(value)
