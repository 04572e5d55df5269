"""Pydantic models for API payloads, transcripts and stream events."""

from .chat import (
    ChatCreate,
    ChatMetadata,
    ChatRecord,
    ChatRequest,
    ChatUpdate,
    TitleResponse,
)
from .common import ChatMessage, ChatRole, WorkflowRunInput
from .events import (
    STREAM_EVENT_ADAPTER,
    AgentOutput,
    FinishEvent,
    StartEvent,
    StepOutputEvent,
    StepResultEvent,
    StepStartEvent,
    StreamEvent,
    dump_stream_event,
)
from .routing import ClarifyingQuestion, Route, RouteLabel, parse_route_label
from .user import UserInfo, UserResponse

__all__ = [
    # Transcript
    "ChatMessage",
    "ChatRole",
    "WorkflowRunInput",
    # Routing
    "ClarifyingQuestion",
    "Route",
    "RouteLabel",
    "parse_route_label",
    # Stream events
    "AgentOutput",
    "FinishEvent",
    "StartEvent",
    "StepOutputEvent",
    "StepResultEvent",
    "StepStartEvent",
    "StreamEvent",
    "STREAM_EVENT_ADAPTER",
    "dump_stream_event",
    # API
    "ChatCreate",
    "ChatMetadata",
    "ChatRecord",
    "ChatRequest",
    "ChatUpdate",
    "TitleResponse",
    "UserInfo",
    "UserResponse",
]
