"""Incremental SSE decoder and frame interpretation for chat streams."""

import codecs
import json
import logging
from dataclasses import dataclass
from typing import Optional, Union

from pydantic import ValidationError

from ..schemas.events import STREAM_EVENT_ADAPTER, StepOutputEvent, StepResultEvent

logger = logging.getLogger(__name__)

DEFAULT_EVENT = "message"
STREAM_ERROR = "Stream error"


@dataclass(frozen=True)
class SSEFrame:
    """One dispatched SSE frame: event name and joined data lines."""

    event: str
    data: str


@dataclass(frozen=True)
class TextDelta:
    text: str


@dataclass(frozen=True)
class FinalText:
    text: str


@dataclass(frozen=True)
class StreamFailure:
    message: str


StreamUpdate = Union[TextDelta, FinalText, StreamFailure]


class SSEDecoder:
    """Turns arbitrarily split byte chunks into SSE frames.

    Bytes are decoded incrementally so a multi-byte character split across
    reads is reassembled. Complete lines are consumed from a rolling buffer;
    a blank line dispatches the accumulated frame.

    Usage:
        decoder = SSEDecoder()
        async for chunk in response.aiter_bytes():
            for frame in decoder.feed(chunk):
                ...
        for frame in decoder.close():
            ...
    """

    def __init__(self) -> None:
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._event: Optional[str] = None
        self._data: list[str] = []

    def feed(self, chunk: Union[bytes, str]) -> list[SSEFrame]:
        """Add a chunk and return the frames it completed."""
        self._buffer += chunk if isinstance(chunk, str) else self._utf8.decode(chunk)

        frames: list[SSEFrame] = []
        while True:
            idx = self._buffer.find("\n")
            if idx == -1:
                break
            line = self._buffer[:idx]
            self._buffer = self._buffer[idx + 1 :]
            self._process_line(line, frames)
        return frames

    def close(self) -> list[SSEFrame]:
        """End of stream: process leftover text and flush once."""
        self._buffer += self._utf8.decode(b"", final=True)

        frames: list[SSEFrame] = []
        if self._buffer:
            for line in self._buffer.split("\n"):
                self._process_line(line, frames)
            self._buffer = ""
        self._flush(frames)
        return frames

    def _process_line(self, line: str, frames: list[SSEFrame]) -> None:
        if line.endswith("\r"):
            line = line[:-1]
        if not line:
            self._flush(frames)
            return

        key, _, value = line.partition(":")
        key = key.strip()
        value = value[1:] if value.startswith(" ") else value
        if key == "event":
            self._event = value
        elif key == "data":
            self._data.append(value)

    def _flush(self, frames: list[SSEFrame]) -> None:
        if self._event is None and not self._data:
            return
        frames.append(SSEFrame(event=self._event or DEFAULT_EVENT, data="\n".join(self._data)))
        self._event = None
        self._data = []


def _result_text(result: object) -> str:
    if not isinstance(result, dict):
        return ""
    final = result.get("text")
    if final is None:
        final = result.get("result")
    return final if isinstance(final, str) else ""


def parse_frame(frame: SSEFrame) -> Optional[StreamUpdate]:
    """Interpret a frame as a transcript update.

    Malformed ``message`` and ``result`` payloads are dropped; an unparsable
    ``error`` payload becomes a generic stream error. ``open`` and ``close``
    carry nothing for the transcript.
    """
    if frame.event == "message":
        try:
            event = STREAM_EVENT_ADAPTER.validate_json(frame.data)
        except ValidationError:
            logger.debug(f"Dropping malformed message frame: {frame.data[:80]}")
            return None
        if isinstance(event, StepOutputEvent):
            delta = event.payload.output.text_delta
            return TextDelta(delta) if delta else None
        if isinstance(event, StepResultEvent):
            final = event.payload.final_text
            return FinalText(final) if final else None
        return None

    if frame.event == "result":
        try:
            body = json.loads(frame.data)
        except json.JSONDecodeError:
            logger.debug("Dropping malformed result frame")
            return None
        final = _result_text(body.get("result")) if isinstance(body, dict) else ""
        return FinalText(final) if final else None

    if frame.event == "error":
        try:
            body = json.loads(frame.data)
        except json.JSONDecodeError:
            return StreamFailure(STREAM_ERROR)
        message = body.get("message") if isinstance(body, dict) else None
        return StreamFailure(message if isinstance(message, str) else STREAM_ERROR)

    return None
