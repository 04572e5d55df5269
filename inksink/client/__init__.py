"""Python client for the InkSink chat API: SSE decoding, transcript and session."""

from .api import ChatApiClient, ChatServiceError
from .decoder import (
    FinalText,
    SSEDecoder,
    SSEFrame,
    StreamFailure,
    StreamUpdate,
    TextDelta,
    parse_frame,
)
from .reducer import TranscriptReducer, reduce_transcript
from .session import ChatSession
from .stream import ChatStreamClient, ChatStreamError

__all__ = [
    "ChatApiClient",
    "ChatServiceError",
    "ChatSession",
    "ChatStreamClient",
    "ChatStreamError",
    "FinalText",
    "SSEDecoder",
    "SSEFrame",
    "StreamFailure",
    "StreamUpdate",
    "TextDelta",
    "TranscriptReducer",
    "parse_frame",
    "reduce_transcript",
]
