"""Normalization of retrieved passages into client-facing sources."""
from typing import List
from models.api import Source
from models.passage import RetrievedPassage


def normalize_sources(passages: List[RetrievedPassage]) -> List[Source]:
    """
    Convert passages into the stable Source shape returned to clients.

    One source per passage, same order. ``page`` is None unless the passage
    carries a numeric page, ``similarity`` is 0 unless it is a finite number,
    ``id`` is derived from the position and ``index`` is the 1-based position.
    """
    return [
        Source(
            id=f"source-{i}",
            page=passage.page,
            content=passage.content,
            similarity=passage.numeric_similarity,
            index=i + 1
        )
        for i, passage in enumerate(passages)
    ]
