"""Tests for the chat streaming endpoints with fake agents and credits."""

import json

import pytest
from fastapi.testclient import TestClient

from inksink.client.decoder import SSEDecoder
from inksink.config import Settings, get_settings
from inksink.dependencies import get_credit_service, get_workflow_runner
from inksink.main import create_app
from inksink.workflows import ChatAgents, ChatWorkflowRunner, create_chat_workflow
from tests.fakes import FakeClassifierAgent, FakeStreamingAgent

MESSAGES = [{"role": "user", "content": "Write a blog post about remote work"}]


@pytest.fixture
def agents(research_agent, writer_agent, assistant_agent):
    return ChatAgents(
        classifier=FakeClassifierAgent("write"),
        research=research_agent,
        writer=writer_agent,
        assistant=assistant_agent,
    )


@pytest.fixture
def app(agents, credit_service):
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: Settings(chat_history_mode="local_redis")
    app.dependency_overrides[get_credit_service] = lambda: credit_service
    app.dependency_overrides[get_workflow_runner] = lambda: ChatWorkflowRunner(
        lambda cancelled: create_chat_workflow(agents, cancelled)
    )
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def _frames(response):
    decoder = SSEDecoder()
    return decoder.feed(response.content) + decoder.close()


class TestChatEndpoint:
    def test_streams_frames_and_deducts_credit(self, client, credit_service):
        response = client.post("/api/chat", json={"messages": MESSAGES, "content": "Draft"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache, no-transform"
        assert response.headers["x-accel-buffering"] == "no"

        frames = _frames(response)
        assert frames[0].event == "open"
        assert frames[-1].event == "close"
        assert frames[-2].event == "result"
        assert json.loads(frames[-2].data) == {
            "status": "success",
            "result": {"result": "Remote work gives you time back."},
        }
        types = [json.loads(f.data)["type"] for f in frames if f.event == "message"]
        assert types[0] == "start" and types[-1] == "finish"
        assert types.count("step-output") == 3
        assert credit_service.deductions == [("00000000-0000-0000-0000-000000000001", 5)]

    def test_missing_messages_is_rejected(self, client, credit_service):
        response = client.post("/api/chat", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "messages array required"}
        assert credit_service.deductions == []

    def test_messages_must_be_a_list(self, client):
        response = client.post("/api/chat", json={"messages": "hello"})

        assert response.status_code == 400
        assert response.json() == {"error": "messages array required"}

    def test_invalid_message_item(self, client):
        response = client.post("/api/chat", json={"messages": [{"role": "system", "content": "x"}]})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_unauthenticated(self, app, client):
        app.dependency_overrides[get_settings] = lambda: Settings(chat_history_mode="redis")

        response = client.post("/api/chat", json={})

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_insufficient_credits_checked_before_body(self, client, credit_service):
        credit_service.credits = 0

        response = client.post("/api/chat", json={})

        assert response.status_code == 402
        assert response.json()["error"].startswith("Insufficient credits")

    def test_failed_run_sends_error_frame_and_keeps_credits(self, agents, client, credit_service):
        agents.writer = FakeStreamingAgent(["Remote work ", "never"], fail_after=1)

        response = client.post("/api/chat", json={"messages": MESSAGES})

        frames = _frames(response)
        assert [f.event for f in frames][-2:] == ["error", "close"]
        assert "model unavailable" in json.loads(frames[-2].data)["message"]
        assert "result" not in [f.event for f in frames]
        assert credit_service.deductions == []


class TestStreamEndpoint:
    def test_no_auth_or_credit_gate(self, app, client, credit_service):
        app.dependency_overrides[get_settings] = lambda: Settings(chat_history_mode="redis")
        credit_service.credits = 0

        response = client.post("/api/stream", json={"messages": MESSAGES})

        assert response.status_code == 200
        assert [f.event for f in _frames(response)][-2:] == ["result", "close"]
        assert credit_service.deductions == []

    def test_missing_messages(self, client):
        response = client.post("/api/stream", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "messages array required"}

    def test_invalid_json(self, client):
        response = client.post(
            "/api/stream", content=b"{oops", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
