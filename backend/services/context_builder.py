"""Context assembly for the generation prompt."""
from typing import List
from models.passage import RetrievedPassage

PAGE_PLACEHOLDER = "?"


def format_passage(ordinal: int, passage: RetrievedPassage) -> str:
    """Render one passage as ``[ordinal] (Page P) content``."""
    page = passage.page if passage.page is not None else PAGE_PLACEHOLDER
    return f"[{ordinal}] (Page {page}) {passage.content}"


def build_context(passages: List[RetrievedPassage]) -> str:
    """
    Concatenate passages into a numbered context block.

    Ordinals are 1-based list positions, so ``[n]`` in the context refers to
    the same passage as ``sources[n-1]`` in the response.

    Args:
        passages: Passages in retrieval order

    Returns:
        Context text, or an empty string when there are no passages
    """
    return "\n\n".join(
        format_passage(i + 1, passage) for i, passage in enumerate(passages)
    )
