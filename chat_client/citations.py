"""Citation marker parsing for assistant answers."""
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

MARKER_PATTERN = re.compile(r"\[([0-9]+)\]")
SPLIT_PATTERN = re.compile(r"(\[[0-9]+\])")
# Longer markers cannot index any source list and stay literal text
MAX_MARKER_DIGITS = 15


@dataclass(frozen=True)
class Citation:
    """A marker resolved against the response's source list."""
    id: str
    page: int
    content: str
    similarity: float
    number: int


@dataclass(frozen=True)
class TextSegment:
    """Literal text, including markers that did not resolve."""
    text: str


@dataclass(frozen=True)
class CitationSegment:
    """A resolved marker, rendered as an interactive control."""
    text: str
    citation: Citation


Segment = Union[TextSegment, CitationSegment]


@dataclass(frozen=True)
class ParsedAnswer:
    """Answer text with its resolved citations and render segments."""
    text: str
    citations: Tuple[Citation, ...]
    segments: Tuple[Segment, ...]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def resolve_citation(number: int, sources: Sequence[Dict[str, Any]]) -> Optional[Citation]:
    """
    Resolve marker ``[number]`` to ``sources[number - 1]``.

    Returns None for a dangling reference (number outside 1..len(sources)).
    """
    if number < 1 or number > len(sources):
        return None
    position = number - 1
    source = sources[position]
    if not isinstance(source, dict):
        source = {}
    page = source.get("page")
    similarity = source.get("similarity")
    source_id = source.get("id")
    return Citation(
        id=source_id if source_id is not None else f"citation-{position}",
        page=page if _is_number(page) else number,
        content=source.get("content") or "",
        similarity=similarity if _is_number(similarity) else 0,
        number=number
    )


def marker_number(digits: str) -> Optional[int]:
    """Number for a marker's digits, None when it is too long to resolve."""
    significant = digits.lstrip("0")
    if len(significant) > MAX_MARKER_DIGITS:
        return None
    return int(significant or "0")


def marker_numbers(text: str) -> List[int]:
    """Distinct resolvable-length marker numbers in order of first appearance."""
    seen = {}
    for match in MARKER_PATTERN.finditer(text):
        number = marker_number(match.group(1))
        if number is not None:
            seen.setdefault(number, None)
    return list(seen)


def split_segments(text: str, citations: Sequence[Citation]) -> Tuple[Segment, ...]:
    """
    Split text into literal and citation segments.

    A marker becomes a CitationSegment only when its number is among the
    resolved citations; otherwise it stays literal text. Joining the
    segments' text always reproduces the input.
    """
    by_number = {citation.number: citation for citation in citations}
    segments: List[Segment] = []
    for part in SPLIT_PATTERN.split(text):
        if not part:
            continue
        match = MARKER_PATTERN.fullmatch(part)
        number = marker_number(match.group(1)) if match else None
        citation = by_number.get(number) if number is not None else None
        if citation is not None:
            segments.append(CitationSegment(text=part, citation=citation))
        else:
            segments.append(TextSegment(text=part))
    return tuple(segments)


def parse_citations(text: str, sources: Optional[Sequence[Dict[str, Any]]] = None) -> ParsedAnswer:
    """
    Parse an answer's ``[n]`` markers against the response's sources.

    Args:
        text: Answer text as returned by the API
        sources: Source dicts from the response, in response order

    Returns:
        ParsedAnswer with citations in first-appearance order (dangling
        markers dropped) and the segments used for rendering
    """
    text = text or ""
    sources = list(sources or [])
    citations = []
    for number in marker_numbers(text):
        citation = resolve_citation(number, sources)
        if citation is not None:
            citations.append(citation)
    return ParsedAnswer(
        text=text,
        citations=tuple(citations),
        segments=split_segments(text, citations)
    )


def render_plain(segments: Sequence[Segment], highlight: str = "*") -> str:
    """Render segments for a terminal, wrapping resolved markers in ``highlight``."""
    parts = []
    for segment in segments:
        if isinstance(segment, CitationSegment):
            parts.append(f"{highlight}{segment.text}{highlight}")
        else:
            parts.append(segment.text)
    return "".join(parts)
