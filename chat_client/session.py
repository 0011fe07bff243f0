"""Chat session client for the POST /chat endpoint."""
import os
import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import httpx

from .citations import Citation, Segment, TextSegment, parse_citations
from .popup import CitationPopupController

logger = logging.getLogger(__name__)

DEFAULT_API_URL = os.getenv("CHAT_API_URL", "http://localhost:8000")
ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."


@dataclass
class Message:
    """One entry in the chat transcript."""
    role: str  # "user" or "assistant"
    content: str
    citations: Tuple[Citation, ...] = ()
    segments: Tuple[Segment, ...] = field(default=())

    def __post_init__(self):
        if not self.segments and self.content:
            self.segments = (TextSegment(text=self.content),)


class ChatSession:
    """
    Client-side chat state: transcript, busy flag and citation popup.

    Only one request may be outstanding per session; submissions made while
    one is in flight are rejected rather than queued.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.client = http_client or httpx.Client(timeout=timeout)
        self.messages: List[Message] = []
        self.popup = CitationPopupController()
        self._busy = threading.Lock()

    @property
    def is_busy(self) -> bool:
        return self._busy.locked()

    def send(self, text: str) -> Optional[Message]:
        """
        Submit a question and append the assistant's reply.

        Args:
            text: Raw input; the server trims it

        Returns:
            The assistant message, or None if the input was blank or a
            request is already in flight
        """
        if not text or not text.strip():
            return None
        if not self._busy.acquire(blocking=False):
            logger.debug("Submission rejected: a request is already in flight")
            return None

        try:
            self.messages.append(Message(role="user", content=text))
            reply = self._request_answer(text)
            self.messages.append(reply)
            return reply
        finally:
            self._busy.release()

    def _request_answer(self, text: str) -> Message:
        try:
            response = self.client.post(f"{self.base_url}/chat", json={"message": text})
            response.raise_for_status()
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError(f"Unexpected response body: {type(data).__name__}")
        except httpx.HTTPStatusError as e:
            logger.error(f"Error sending message: {e.response.status_code} {_error_text(e.response)}")
            return Message(role="assistant", content=ERROR_MESSAGE)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error sending message: {e}")
            return Message(role="assistant", content=ERROR_MESSAGE)

        answer = data.get("answer")
        sources = data.get("sources")
        parsed = parse_citations(
            answer if isinstance(answer, str) else "",
            sources if isinstance(sources, list) else []
        )
        return Message(
            role="assistant",
            content=parsed.text,
            citations=parsed.citations,
            segments=parsed.segments
        )

    def navigate(self) -> None:
        """Leaving the page closes any open citation popup."""
        self.popup.reset()

    def close(self) -> None:
        self.client.close()


def _error_text(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text
