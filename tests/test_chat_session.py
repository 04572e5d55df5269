"""Tests for the chat session: load, persist, select and delete."""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from inksink.client import ChatApiClient, ChatServiceError, ChatSession, ChatStreamClient
from inksink.core.sse import format_sse_event
from inksink.schemas import ChatMessage, ChatMetadata, ChatRecord

DOCUMENT_ID = "doc-1"


def _record(chat_id="chat-1", title="Greetings", messages=None):
    return ChatRecord(
        id=chat_id,
        document_id=DOCUMENT_ID,
        title=title,
        created_at="2025-01-01T10:00:00+00:00",
        updated_at="2025-01-01T10:00:00+00:00",
        messages=messages or [ChatMessage(role="user", content="Hi")],
    )


def _metadata(chat_id="chat-1", title="Greetings"):
    return ChatMetadata(**_record(chat_id, title).model_dump(exclude={"messages"}))


@pytest.fixture
def api():
    api = AsyncMock(spec=ChatApiClient)
    api.get_most_recent_chat.return_value = None
    api.list_chats.return_value = []
    api.generate_title.return_value = "Remote Work Intro"
    api.create_chat.return_value = _record(title="Remote Work Intro")
    return api


@pytest.fixture
async def http():
    def handler(request):
        body = (
            format_sse_event("open", {"ok": True})
            + format_sse_event("result", {"status": "success", "result": {"result": "Sure!"}})
            + format_sse_event("close", {"ok": True})
        )
        return httpx.Response(200, content=body.encode())

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test") as client:
        yield client


@pytest.fixture
def session(api, http):
    return ChatSession(DOCUMENT_ID, api, ChatStreamClient(http))


async def test_load_most_recent_chat(session, api):
    api.get_most_recent_chat.return_value = _record(messages=[ChatMessage(role="user", content="Earlier")])
    api.list_chats.return_value = [_metadata(f"chat-{i}") for i in range(12)]

    await session.load()

    assert session.current_chat.id == "chat-1"
    assert [m.content for m in session.messages] == ["Earlier"]
    assert len(session.recent_chats) == 10


async def test_first_turn_creates_titled_chat(session, api):
    await session.send_message("Write an intro about remote work")

    api.generate_title.assert_awaited_once_with("Write an intro about remote work")
    api.create_chat.assert_awaited_once()
    _, messages = api.create_chat.await_args.args
    assert [(m.role, m.content) for m in messages] == [
        ("user", "Write an intro about remote work"),
        ("assistant", "Sure!"),
    ]
    assert api.create_chat.await_args.kwargs["title"] == "Remote Work Intro"
    assert session.current_chat is not None


async def test_next_turn_updates_current_chat(session, api):
    await session.send_message("First")
    await session.send_message("Second")

    api.create_chat.assert_awaited_once()
    api.update_chat.assert_awaited_once()
    assert api.update_chat.await_args.args == ("chat-1",)
    assert len(api.update_chat.await_args.kwargs["messages"]) == 4


async def test_send_while_saving_does_not_create_second_chat(session, api):
    saving = asyncio.Event()
    release = asyncio.Event()

    async def slow_create(document_id, messages, title=None):
        saving.set()
        await release.wait()
        return _record(title=title)

    api.create_chat.side_effect = slow_create
    first = asyncio.create_task(session.send_message("First"))
    await asyncio.wait_for(saving.wait(), timeout=5)

    assert session.stream.is_loading
    await session.send_message("Second")

    release.set()
    await first

    assert api.create_chat.await_count == 1
    assert [m.content for m in session.messages] == ["First", "Sure!"]
    assert not session.stream.is_loading


async def test_title_failure_falls_back(session, api):
    api.generate_title.side_effect = ChatServiceError("Failed to generate title")

    await session.persist([ChatMessage(role="user", content="Hi")])

    assert api.create_chat.await_args.kwargs["title"] == "New Chat"


async def test_persistence_errors_are_swallowed(session, api):
    api.create_chat.side_effect = ChatServiceError("database down")

    await session.send_message("Hello")

    assert session.messages[-1].content == "Sure!"
    assert session.stream.error is None
    assert session.current_chat is None


async def test_nothing_persisted_without_document(api, http):
    session = ChatSession(None, api, ChatStreamClient(http))

    await session.persist([ChatMessage(role="user", content="Hi")])

    api.create_chat.assert_not_awaited()


async def test_select_and_delete_current_chat(session, api):
    api.get_chat.return_value = _record("chat-7", messages=[ChatMessage(role="user", content="Picked")])

    await session.select_chat("chat-7")
    assert session.current_chat.id == "chat-7"
    assert session.messages[0].content == "Picked"

    await session.delete_chat("chat-7")
    api.delete_chat.assert_awaited_once_with("chat-7")
    assert session.current_chat is None
    assert session.messages == []


async def test_new_chat(session, api):
    api.get_most_recent_chat.return_value = _record()
    await session.load()

    session.new_chat()

    assert session.current_chat is None
    assert session.messages == []
