"""Tests for responder token streams."""

import pytest

from inksink.agents.responders import ClarificationResponder, Responder, TokenStream
from inksink.core.errors import ResponderError
from tests.fakes import FakeStreamingAgent


async def _collect(stream):
    return [delta async for delta in stream]


async def test_responder_streams_deltas_in_order():
    agent = FakeStreamingAgent(["Once ", "upon ", "a time"])

    stream = Responder(agent).respond(["history"])

    assert await _collect(stream) == ["Once ", "upon ", "a time"]
    assert stream.text == "Once upon a time"
    assert agent.calls == [["history"]]


async def test_stream_cannot_be_consumed_twice():
    stream = Responder(FakeStreamingAgent(["a"])).respond([])
    await _collect(stream)

    with pytest.raises(RuntimeError):
        await _collect(stream)


async def test_text_is_unavailable_before_completion():
    stream = Responder(FakeStreamingAgent(["a"])).respond([])

    with pytest.raises(RuntimeError):
        stream.text


async def test_failure_after_partial_output():
    stream = Responder(FakeStreamingAgent(["Partial ", "never"], fail_after=1)).respond([])
    received = []

    with pytest.raises(ResponderError, match="model unavailable"):
        async for delta in stream:
            received.append(delta)

    assert received == ["Partial "]
    assert not stream.done


async def test_clarification_echoes_question():
    stream = ClarificationResponder("Research or writing?").respond([])

    assert await _collect(stream) == ["Research or writing?"]
    assert stream.text == "Research or writing?"


async def test_from_text():
    stream = TokenStream.from_text("hello")

    assert await _collect(stream) == ["hello"]


async def test_closing_early_closes_agent_stream():
    agent = FakeStreamingAgent(["One ", "two ", "three"])
    stream = Responder(agent).respond([])

    async for delta in stream:
        assert delta == "One "
        await stream.aclose()
        break

    assert agent.produced == 1
    assert agent.closed
    assert not stream.done
