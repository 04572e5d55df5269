"""Tests for the incremental SSE decoder and frame interpretation."""

import json

import pytest

from inksink.client.decoder import (
    FinalText,
    SSEDecoder,
    SSEFrame,
    StreamFailure,
    TextDelta,
    parse_frame,
)
from inksink.core.sse import format_sse_event
from inksink.schemas.events import STREAM_EVENT_ADAPTER, dump_stream_event


def _step_output(text, output_type="text-delta"):
    return {
        "type": "step-output",
        "runId": "run-1",
        "from": "USER",
        "payload": {
            "output": {"type": output_type, "from": "AGENT", "payload": {"text": text}},
            "stepCallId": "call-1",
            "stepName": "write",
        },
    }


def _step_result(result):
    return {
        "type": "step-result",
        "runId": "run-1",
        "from": "WORKFLOW",
        "payload": {"stepName": "write", "stepCallId": "call-1", "result": result, "status": "success"},
    }


STREAM = (
    format_sse_event("open", {"ok": True})
    + format_sse_event("message", _step_output("Café ✍️ "))
    + format_sse_event("message", _step_output("草稿"))
    + format_sse_event("result", {"status": "success", "result": {"result": "Café ✍️ 草稿"}})
    + format_sse_event("close", {"ok": True})
).encode("utf-8")


def _decode_all(chunks):
    decoder = SSEDecoder()
    frames = []
    for chunk in chunks:
        frames.extend(decoder.feed(chunk))
    return frames + decoder.close()


class TestSSEDecoder:
    def test_whole_stream(self):
        frames = _decode_all([STREAM])

        assert [f.event for f in frames] == ["open", "message", "message", "result", "close"]

    def test_split_at_every_offset(self):
        expected = _decode_all([STREAM])

        for offset in range(len(STREAM) + 1):
            assert _decode_all([STREAM[:offset], STREAM[offset:]]) == expected, offset

    def test_byte_by_byte(self):
        chunks = [STREAM[i : i + 1] for i in range(len(STREAM))]

        assert _decode_all(chunks) == _decode_all([STREAM])

    def test_multiline_data_is_joined(self):
        frames = _decode_all([b"event: note\ndata: a\ndata:b\n\n"])

        assert frames == [SSEFrame(event="note", data="a\nb")]

    def test_crlf_lines(self):
        frames = _decode_all([b"event: open\r\ndata: {}\r\n\r\n"])

        assert frames == [SSEFrame(event="open", data="{}")]

    def test_unknown_keys_and_comments_are_ignored(self):
        frames = _decode_all([b": keep-alive\nid: 7\nretry: 100\nevent: open\ndata: {}\n\n"])

        assert frames == [SSEFrame(event="open", data="{}")]

    def test_data_without_event_is_a_message(self):
        frames = _decode_all([b"data: {}\n\n"])

        assert frames == [SSEFrame(event="message", data="{}")]

    def test_close_flushes_unterminated_frame(self):
        decoder = SSEDecoder()

        assert decoder.feed(b"event: close\ndata: {\"ok\": true}") == []
        assert decoder.close() == [SSEFrame(event="close", data='{"ok": true}')]

    def test_close_with_nothing_buffered(self):
        decoder = SSEDecoder()
        decoder.feed(b"event: open\ndata: {}\n\n")

        assert decoder.close() == []

    def test_str_chunks(self):
        assert _decode_all(["event: open\n", "data: {}\n\n"]) == [SSEFrame(event="open", data="{}")]

    def test_only_one_leading_space_is_removed(self):
        text = "  indented line\n    code block"

        frames = _decode_all([format_sse_event("note", text).encode("utf-8")])

        assert frames == [SSEFrame(event="note", data=text)]


class TestParseFrame:
    def test_text_delta(self):
        frame = SSEFrame("message", json.dumps(_step_output("Hello")))

        assert parse_frame(frame) == TextDelta("Hello")

    def test_non_text_output_is_ignored(self):
        frame = SSEFrame("message", json.dumps(_step_output("", output_type="finish")))

        assert parse_frame(frame) is None

    @pytest.mark.parametrize("result", [{"result": "Final"}, {"text": "Final"}])
    def test_step_result_final_text(self, result):
        assert parse_frame(SSEFrame("message", json.dumps(_step_result(result)))) == FinalText("Final")

    def test_classifier_step_result_is_ignored(self):
        assert parse_frame(SSEFrame("message", json.dumps(_step_result({"route": "write"})))) is None

    def test_malformed_message_is_dropped(self):
        assert parse_frame(SSEFrame("message", "{not json")) is None
        assert parse_frame(SSEFrame("message", json.dumps({"type": "step-output"}))) is None

    def test_result_frame(self):
        frame = SSEFrame("result", json.dumps({"status": "success", "result": {"result": "Done"}}))

        assert parse_frame(frame) == FinalText("Done")

    def test_malformed_result_is_dropped(self):
        assert parse_frame(SSEFrame("result", "oops")) is None

    def test_error_frame(self):
        assert parse_frame(SSEFrame("error", '{"message": "writer failed"}')) == StreamFailure("writer failed")

    def test_unparsable_error_frame(self):
        assert parse_frame(SSEFrame("error", "boom")) == StreamFailure("Stream error")

    def test_open_and_close_carry_nothing(self):
        assert parse_frame(SSEFrame("open", '{"ok": true}')) is None
        assert parse_frame(SSEFrame("close", '{"ok": true}')) is None


def test_events_round_trip_through_encoder_and_decoder():
    events = [
        STREAM_EVENT_ADAPTER.validate_python(
            {"type": "start", "runId": "run-1", "from": "WORKFLOW", "payload": {}}
        ),
        STREAM_EVENT_ADAPTER.validate_python(_step_output("Line one\nline two ✍️")),
        STREAM_EVENT_ADAPTER.validate_python(_step_result({"result": "Done"})),
        STREAM_EVENT_ADAPTER.validate_python(
            {"type": "finish", "runId": "run-1", "from": "WORKFLOW", "payload": {}}
        ),
    ]
    raw = "".join(format_sse_event("message", dump_stream_event(e)) for e in events).encode("utf-8")

    for offset in range(len(raw) + 1):
        frames = _decode_all([raw[:offset], raw[offset:]])
        assert [STREAM_EVENT_ADAPTER.validate_json(f.data) for f in frames] == events
