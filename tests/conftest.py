"""Pytest configuration and fixtures."""

import os

import pytest

# Local mode: no SSO headers needed
os.environ.setdefault("CHAT_HISTORY_MODE", "local_redis")
os.environ.setdefault("AZURE_OPENAI_API_KEY", "test-key")
os.environ.setdefault("AZURE_OPENAI_ENDPOINT", "https://test.openai.azure.com/")
os.environ.setdefault("AZURE_OPENAI_DEPLOYMENT_NAME", "gpt-4.1")

from tests.fakes import FakeChatStore, FakeCreditService, FakeStreamingAgent  # noqa: E402


@pytest.fixture
def writer_agent():
    return FakeStreamingAgent(["Remote work ", "gives you ", "time back."], name="writer-agent")


@pytest.fixture
def research_agent():
    return FakeStreamingAgent(["Marie Curie ", "discovered radium."], name="research-agent")


@pytest.fixture
def assistant_agent():
    return FakeStreamingAgent(["Hi! ", "Ask me anything."], name="assistant-agent")


@pytest.fixture
def credit_service():
    return FakeCreditService()


@pytest.fixture
def chat_store():
    return FakeChatStore()
