"""Tests for the transcript reducer."""

from inksink.client.decoder import FinalText, StreamFailure, TextDelta
from inksink.client.reducer import TranscriptReducer, reduce_transcript
from inksink.schemas import ChatMessage


def _contents(messages):
    return [(m.role, m.content) for m in messages]


def test_first_delta_starts_assistant_message():
    messages = [ChatMessage(role="user", content="Hi")]

    updated = reduce_transcript(messages, TextDelta("Hel"))

    assert _contents(updated) == [("user", "Hi"), ("assistant", "Hel")]
    assert _contents(messages) == [("user", "Hi")]


def test_deltas_concatenate():
    messages = [ChatMessage(role="user", content="Hi")]
    for delta in ["Hel", "lo", "!"]:
        messages = reduce_transcript(messages, TextDelta(delta))

    assert _contents(messages)[-1] == ("assistant", "Hello!")


def test_final_text_replaces_streamed_content():
    messages = [ChatMessage(role="user", content="Hi"), ChatMessage(role="assistant", content="Hel")]

    updated = reduce_transcript(messages, FinalText("Hello there"))

    assert _contents(updated) == [("user", "Hi"), ("assistant", "Hello there")]


def test_final_text_is_idempotent():
    messages = [ChatMessage(role="user", content="Hi"), ChatMessage(role="assistant", content="Hel")]

    once = reduce_transcript(messages, FinalText("Hello"))
    twice = reduce_transcript(once, FinalText("Hello"))

    assert _contents(once) == _contents(twice)


def test_empty_final_text_is_ignored():
    messages = [ChatMessage(role="user", content="Hi")]

    assert _contents(reduce_transcript(messages, FinalText(""))) == [("user", "Hi")]


def test_final_text_without_deltas_pushes_message():
    messages = [ChatMessage(role="user", content="Hi")]

    assert _contents(reduce_transcript(messages, FinalText("Hello")))[-1] == ("assistant", "Hello")


class TestTranscriptReducer:
    def test_thinking_until_first_delta(self):
        reducer = TranscriptReducer()
        assert not reducer.thinking

        reducer.begin_turn("Write a haiku")
        assert reducer.thinking

        reducer.apply(TextDelta("Autumn"))
        assert not reducer.thinking

        reducer.end_turn()
        assert not reducer.thinking

    def test_end_turn_clears_thinking_without_output(self):
        reducer = TranscriptReducer()
        reducer.begin_turn("Hello")

        reducer.end_turn()

        assert not reducer.thinking
        assert _contents(reducer.messages) == [("user", "Hello")]

    def test_failure_keeps_partial_text(self):
        reducer = TranscriptReducer()
        reducer.begin_turn("Hello")
        reducer.apply(TextDelta("Partial"))

        reducer.apply(StreamFailure("writer failed"))

        assert reducer.error == "writer failed"
        assert _contents(reducer.messages)[-1] == ("assistant", "Partial")

    def test_begin_turn_clears_previous_error(self):
        reducer = TranscriptReducer()
        reducer.fail("boom")

        reducer.begin_turn("Again")

        assert reducer.error is None


def test_deltas_then_final_equals_final_alone():
    user = [ChatMessage(role="user", content="Tweet about coffee")]
    deltas = ["Coffee ", "is ", "nice."]

    streamed = user
    for delta in deltas:
        streamed = reduce_transcript(streamed, TextDelta(delta))
    finalized = reduce_transcript(streamed, FinalText("".join(deltas)))

    assert _contents(streamed) == _contents(finalized)
    assert _contents(finalized) == _contents(reduce_transcript(user, FinalText("Coffee is nice.")))
