"""Pydantic schemas for the workflow stream events carried in `message` frames.

Every event shares `type`, `runId`, `from` and a type-specific `payload`.
Only `step-output` text deltas and `step-result` final text are consumed by
the transcript reducer; the other types are informational.
"""

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

TEXT_DELTA = "text-delta"


class _EventModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AgentOutput(_EventModel):
    """Output chunk produced by an agent inside a step."""

    type: str = Field(..., description="Agent output type, e.g. 'text-delta'")
    from_: str = Field("AGENT", alias="from")
    payload: Dict[str, Any] = Field(default_factory=dict)

    @property
    def text_delta(self) -> str:
        if self.type != TEXT_DELTA:
            return ""
        text = self.payload.get("text")
        return text if isinstance(text, str) else ""


class StepStartPayload(_EventModel):
    step_name: str = Field(..., alias="stepName")
    step_call_id: str = Field(..., alias="stepCallId")
    started_at: Optional[int] = Field(None, alias="startedAt")
    status: str = "running"


class StepOutputPayload(_EventModel):
    output: AgentOutput
    step_call_id: str = Field(..., alias="stepCallId")
    step_name: str = Field(..., alias="stepName")


class StepResultPayload(_EventModel):
    step_name: str = Field(..., alias="stepName")
    step_call_id: str = Field(..., alias="stepCallId")
    result: Optional[Dict[str, Any]] = None
    status: str = "success"
    ended_at: Optional[int] = Field(None, alias="endedAt")

    @property
    def final_text(self) -> str:
        """Final responder text if this step produced one."""
        if not self.result:
            return ""
        final = self.result.get("text")
        if final is None:
            final = self.result.get("result")
        return final if isinstance(final, str) else ""


class StartEvent(_EventModel):
    type: Literal["start"] = "start"
    run_id: str = Field(..., alias="runId")
    from_: str = Field("WORKFLOW", alias="from")
    payload: Dict[str, Any] = Field(default_factory=dict)


class StepStartEvent(_EventModel):
    type: Literal["step-start"] = "step-start"
    run_id: str = Field(..., alias="runId")
    from_: str = Field("WORKFLOW", alias="from")
    payload: StepStartPayload


class StepOutputEvent(_EventModel):
    type: Literal["step-output"] = "step-output"
    run_id: str = Field(..., alias="runId")
    from_: str = Field("USER", alias="from")
    payload: StepOutputPayload


class StepResultEvent(_EventModel):
    type: Literal["step-result"] = "step-result"
    run_id: str = Field(..., alias="runId")
    from_: str = Field("WORKFLOW", alias="from")
    payload: StepResultPayload


class FinishEvent(_EventModel):
    type: Literal["finish"] = "finish"
    run_id: str = Field(..., alias="runId")
    from_: str = Field("WORKFLOW", alias="from")
    payload: Dict[str, Any] = Field(default_factory=dict)


StreamEvent = Annotated[
    Union[StartEvent, StepStartEvent, StepOutputEvent, StepResultEvent, FinishEvent],
    Field(discriminator="type"),
]

STREAM_EVENT_ADAPTER: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)


def dump_stream_event(event: BaseModel) -> dict:
    """Wire form of a stream event (camelCase keys)."""
    return event.model_dump(mode="json", by_alias=True)
