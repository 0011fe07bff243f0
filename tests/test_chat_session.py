"""Unit tests for the ChatSession client."""
import json
import sys
import threading
from pathlib import Path

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx
import pytest
from chat_client.citations import CitationSegment, TextSegment
from chat_client.popup import BoundingBox, Closed
from chat_client.session import ChatSession, ERROR_MESSAGE


ANSWER = {
    "answer": "Macronutrients include carbs, fats, and proteins [1][2].",
    "sources": [
        {"id": "source-0", "page": 12, "content": "Carbohydrates ...", "similarity": 0.91, "index": 1},
        {"id": "source-1", "page": 45, "content": "Lipids ...", "similarity": 0.87, "index": 2},
        {"id": "source-2", "page": 46, "content": "Proteins ...", "similarity": 0.85, "index": 3},
    ],
}


def _session(handler):
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return ChatSession(base_url="http://api.test/", http_client=http_client)


class TestChatSession:
    """Test suite for ChatSession."""

    def test_send_parses_citations(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=ANSWER)

        session = _session(handler)
        reply = session.send("What are macronutrients?")

        assert str(requests[0].url) == "http://api.test/chat"
        assert json.loads(requests[0].content) == {"message": "What are macronutrients?"}
        assert reply.role == "assistant"
        assert reply.content == ANSWER["answer"]
        assert [c.page for c in reply.citations] == [12, 45]
        assert isinstance(reply.segments[1], CitationSegment)
        assert [m.role for m in session.messages] == ["user", "assistant"]
        assert not session.is_busy

    def test_blank_input_is_ignored(self):
        session = _session(lambda request: pytest.fail("no request expected"))

        assert session.send("   ") is None
        assert session.messages == []

    def test_server_error_maps_to_synthetic_message(self):
        session = _session(lambda request: httpx.Response(500, json={"error": "store down"}))

        reply = session.send("What is fiber?")

        assert reply.content == ERROR_MESSAGE
        assert reply.citations == ()
        assert "store down" not in reply.content

    def test_bad_request_maps_to_synthetic_message(self):
        session = _session(lambda request: httpx.Response(400, json={"error": "Empty query"}))

        assert session.send("x").content == ERROR_MESSAGE

    def test_network_error_maps_to_synthetic_message(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        session = _session(handler)

        assert session.send("What is fiber?").content == ERROR_MESSAGE
        assert not session.is_busy

    def test_invalid_json_maps_to_synthetic_message(self):
        session = _session(lambda request: httpx.Response(200, text="<html>oops</html>"))

        assert session.send("What is fiber?").content == ERROR_MESSAGE

    def test_submission_rejected_while_busy(self):
        started = threading.Event()
        release = threading.Event()

        def handler(request):
            started.set()
            release.wait(timeout=5)
            return httpx.Response(200, json=ANSWER)

        session = _session(handler)
        worker = threading.Thread(target=session.send, args=("first question",))
        worker.start()
        try:
            assert started.wait(timeout=5)
            assert session.is_busy
            assert session.send("second question") is None
        finally:
            release.set()
            worker.join(timeout=5)

        assert [m.content for m in session.messages if m.role == "user"] == ["first question"]
        assert not session.is_busy

    def test_navigate_closes_popup(self):
        session = _session(lambda request: httpx.Response(200, json=ANSWER))
        reply = session.send("What are macronutrients?")

        session.popup.open(reply.citations[0], BoundingBox(left=5, top=50))
        session.navigate()

        assert session.popup.state == Closed()

    def test_user_message_has_text_segment(self):
        session = _session(lambda request: httpx.Response(200, json=ANSWER))
        session.send("hello")

        assert session.messages[0].segments == (TextSegment(text="hello"),)

    def test_oversized_marker_in_answer_stays_literal(self):
        marker = "[" + "9" * 5000 + "]"
        body = {"answer": f"Claim {marker}.", "sources": ANSWER["sources"]}
        session = _session(lambda request: httpx.Response(200, json=body))

        reply = session.send("What are macronutrients?")

        assert reply.citations == ()
        assert TextSegment(text=marker) in reply.segments
