"""
Tests for the chat HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from smartchat.api import app, init_api
from smartchat.services import BaseLLMService, ChatService, SessionMemory
from smartchat.services.chat_service import ERROR_REPLY
from smartchat.tools import ToolRegistry


class TestChatAPI:
    """Routes under /api/chat backed by a scripted model."""

    @pytest.fixture(autouse=True)
    def setup(self, llm):
        """Initialize the API with an in-memory chat service."""
        self.llm = llm
        registry = ToolRegistry()
        registry.mark_initialized()
        self.memory = SessionMemory()
        self.service = ChatService(self.llm, registry, self.memory)
        init_api(self.service, message_length_limit=50)
        self.client = TestClient(app)

    def test_send_message(self):
        self.llm.script("Hello there!")

        response = self.client.post(
            "/api/chat/message", json={"message": "  Hi  ", "sessionId": "abc"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["reply"] == "Hello there!"
        assert body["response"] == "Hello there!"
        assert body["sessionId"] == "abc"
        assert body["success"] is True
        assert self.memory.history("abc")[0].content == "Hi"

    def test_session_id_generated_when_missing(self):
        response = self.client.post("/api/chat/message", json={"message": "Hi"})

        session_id = response.json()["sessionId"]
        assert session_id.startswith("session-")
        assert self.memory.session_exists(session_id)

    def test_empty_message_rejected(self):
        response = self.client.post("/api/chat/message", json={"message": "   ", "sessionId": "abc"})

        assert response.status_code == 400
        assert response.json()["error"] == "Message cannot be empty"
        assert response.json()["success"] is False
        assert self.llm.call_count == 0

    def test_long_message_rejected(self):
        response = self.client.post("/api/chat/message", json={"message": "x" * 51})

        assert response.status_code == 400
        assert response.json()["error"] == "Message is too long (max 50 characters)"

    def test_model_failure_returns_apology(self):
        self.llm.script(BaseLLMService.error_text("backend unavailable"))

        response = self.client.post("/api/chat/message", json={"message": "Hi", "sessionId": "abc"})

        assert response.status_code == 200
        assert response.json()["reply"] == ERROR_REPLY

    def test_legacy_prompt(self):
        self.llm.script("Paris")

        response = self.client.post("/api/chat", json={"prompt": "Capital of France?"})

        assert response.status_code == 200
        assert response.json() == {"response": "Paris"}
        assert self.llm.prompts == ["Capital of France?"]

    def test_legacy_prompt_empty(self):
        response = self.client.post("/api/chat", json={"prompt": ""})

        assert response.status_code == 400
        assert response.json() == {"error": "Prompt cannot be empty"}

    def test_history_and_formatted_history(self):
        self.client.post("/api/chat/message", json={"message": "Hi", "sessionId": "abc"})

        history = self.client.get("/api/chat/history/abc").json()
        formatted = self.client.get("/api/chat/history/abc/formatted").json()

        assert [(m["role"], m["content"]) for m in history] == [("user", "Hi"), ("assistant", "OK")]
        assert formatted == {
            "sessionId": "abc",
            "messageCount": 2,
            "conversation": "USER: Hi\n\nASSISTANT: OK\n\n",
        }

    def test_export(self):
        self.client.post("/api/chat/message", json={"message": "Hi", "sessionId": "abc"})

        export = self.client.get("/api/chat/export/abc").json()

        assert export["sessionId"] == "abc"
        assert export["messageCount"] == 2
        assert export["exportTime"] > 0
        assert export["messages"][0]["content"] == "Hi"

    def test_clear(self):
        self.client.post("/api/chat/message", json={"message": "Hi", "sessionId": "abc"})

        response = self.client.delete("/api/chat/clear/abc")

        assert response.json() == {"message": "Conversation cleared successfully", "sessionId": "abc"}
        assert self.client.get("/api/chat/history/abc").json() == []

    def test_summary(self):
        response = self.client.get("/api/chat/summary/nobody")

        assert response.json() == {"summary": "No conversation history.", "sessionId": "nobody"}

    def test_stats(self):
        self.client.post("/api/chat/message", json={"message": "Hi", "sessionId": "abc"})

        stats = self.client.get("/api/chat/stats").json()

        assert stats["activeSessions"] == 1
        assert stats["totalMessages"] == 2
        assert stats["maxHistorySize"] == 20
        assert stats["modelAvailable"] is True
        assert stats["aiProvider"] == "scripted"

    def test_health(self):
        health = self.client.get("/api/chat/health").json()

        assert health["status"] == "UP"
        assert health["chat_service"] == "connected"

    def test_cors_allows_any_origin(self):
        response = self.client.get(
            "/api/chat/health", headers={"Origin": "http://example.com"}
        )

        assert response.headers["access-control-allow-origin"] == "*"
