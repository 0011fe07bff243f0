"""Client library for the Nutrition Assistant chat API."""
from .citations import (
    Citation,
    CitationSegment,
    ParsedAnswer,
    TextSegment,
    parse_citations,
    render_plain,
)
from .popup import BoundingBox, CitationPopupController, Closed, Open, Position, describe_popup
from .session import ChatSession, Message, ERROR_MESSAGE

__all__ = [
    "Citation",
    "CitationSegment",
    "ParsedAnswer",
    "TextSegment",
    "parse_citations",
    "render_plain",
    "BoundingBox",
    "CitationPopupController",
    "Closed",
    "Open",
    "Position",
    "describe_popup",
    "ChatSession",
    "Message",
    "ERROR_MESSAGE",
]
