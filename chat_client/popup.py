"""Single-slot citation popup state machine."""
import logging
from dataclasses import dataclass
from typing import Optional, Union

from .citations import Citation

logger = logging.getLogger(__name__)

POPUP_OFFSET = 10
EXCERPT_LENGTH = 200


@dataclass(frozen=True)
class BoundingBox:
    """On-screen box of the citation control that was activated."""
    left: float
    top: float
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class Closed:
    """No popup is shown."""


@dataclass(frozen=True)
class Open:
    """Exactly one popup is shown for ``citation`` at ``position``."""
    citation: Citation
    position: Position


PopupState = Union[Closed, Open]


@dataclass(frozen=True)
class PopupView:
    """Display strings for an open popup."""
    page_label: str
    excerpt: str
    similarity_label: str


def describe_popup(citation: Citation) -> PopupView:
    content = citation.content
    excerpt = content[:EXCERPT_LENGTH]
    if len(content) > EXCERPT_LENGTH:
        excerpt += "..."
    return PopupView(
        page_label=f"Page {citation.page}",
        excerpt=excerpt,
        similarity_label=f"Similarity: {citation.similarity * 100:.1f}%"
    )


class CitationPopupController:
    """
    Tracks which citation popup, if any, is open.

    States are ``Closed`` and ``Open(citation, position)``. Opening while a
    popup is already open replaces it, so at most one is ever visible. The
    background scrim exists only while open and closes the popup when
    clicked.
    """

    def __init__(self):
        self.state: PopupState = Closed()

    @property
    def is_open(self) -> bool:
        return isinstance(self.state, Open)

    @property
    def scrim_visible(self) -> bool:
        return self.is_open

    def open(self, citation: Citation, anchor: BoundingBox) -> Open:
        """Show ``citation`` just above the control's bounding box."""
        position = Position(x=anchor.left, y=anchor.top - POPUP_OFFSET)
        self.state = Open(citation=citation, position=position)
        logger.debug(f"Opened citation [{citation.number}] at ({position.x}, {position.y})")
        return self.state

    def close(self) -> Closed:
        self.state = Closed()
        return self.state

    def click_scrim(self) -> PopupState:
        if self.scrim_visible:
            return self.close()
        return self.state

    def reset(self) -> Closed:
        """Navigation away from the page drops any open popup."""
        return self.close()

    def view(self) -> Optional[PopupView]:
        if isinstance(self.state, Open):
            return describe_popup(self.state.citation)
        return None
