"""Run adapter: drives one chat workflow run and maps it to wire events."""

import asyncio
import logging
import time
import uuid
from enum import Enum
from typing import Any, AsyncIterator, Callable, Optional

from agent_framework._workflows._events import WorkflowOutputEvent
from pydantic import BaseModel

from ..core.errors import ChatWorkflowError
from ..schemas.common import WorkflowRunInput
from ..schemas.events import (
    AgentOutput,
    FinishEvent,
    StartEvent,
    StepOutputEvent,
    StepOutputPayload,
    StepResultEvent,
    StepResultPayload,
    StepStartEvent,
    StepStartPayload,
    TEXT_DELTA,
)
from .chat_workflow import (
    ASSIST_STEP,
    CLARIFY_STEP,
    CLASSIFY_STEP,
    RESEARCH_STEP,
    WRITE_STEP,
)
from .events import StepCompleted, StepDelta, StepFailed, StepStarted

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    START = "start"
    CLASSIFYING = "classifying"
    RESEARCHING = "researching"
    WRITING = "writing"
    ASSISTING = "assisting"
    CLARIFYING = "clarifying"
    FINISHED = "finished"


STEP_STATES = {
    CLASSIFY_STEP: WorkflowState.CLASSIFYING,
    RESEARCH_STEP: WorkflowState.RESEARCHING,
    WRITE_STEP: WorkflowState.WRITING,
    ASSIST_STEP: WorkflowState.ASSISTING,
    CLARIFY_STEP: WorkflowState.CLARIFYING,
}


def _now_ms() -> int:
    return int(time.time() * 1000)


class ChatWorkflowRun:
    """A single run of the chat workflow.

    ``stream()`` yields the wire events (start, step-*, finish) as pydantic
    models. Once the stream is exhausted, ``result`` holds the final payload
    sent in the SSE ``result`` frame. Failures are raised from ``stream()``
    after the workflow has converged. If the consumer stops early (client
    disconnect), ``cancelled`` is set so the streaming responder stops too.
    """

    def __init__(
        self,
        workflow: Any,
        run_input: WorkflowRunInput,
        run_id: Optional[str] = None,
        cancelled: Optional[asyncio.Event] = None,
    ):
        self._workflow = workflow
        self._cancelled = cancelled or asyncio.Event()
        self._input = run_input
        self.run_id = run_id or str(uuid.uuid4())
        self.state = WorkflowState.START
        self.transitions: list[WorkflowState] = [WorkflowState.START]
        self.route: Optional[str] = None
        self._text: Optional[str] = None
        self._consumed = False

    def _enter(self, state: WorkflowState) -> None:
        if state != self.state:
            logger.debug(f"Run {self.run_id}: {self.state.value} -> {state.value}")
            self.state = state
            self.transitions.append(state)

    async def stream(self) -> AsyncIterator[BaseModel]:
        if self._consumed:
            raise RuntimeError("A workflow run can only be streamed once")
        self._consumed = True

        failure: Optional[Exception] = None
        call_ids: dict[str, str] = {}
        converged = False

        logger.info(f"Starting chat workflow run {self.run_id}")
        yield StartEvent(run_id=self.run_id)

        try:
            # Classification is the first step of every run
            self._enter(WorkflowState.CLASSIFYING)
            async for event in self._workflow.run_stream(self._input):
                if isinstance(event, StepStarted):
                    self._enter(STEP_STATES.get(event.step_name, self.state))
                    call_ids[event.step_name] = str(uuid.uuid4())
                    yield StepStartEvent(
                        run_id=self.run_id,
                        payload=StepStartPayload(
                            step_name=event.step_name,
                            step_call_id=call_ids[event.step_name],
                            started_at=event.started_at or _now_ms(),
                        ),
                    )

                elif isinstance(event, StepDelta):
                    yield StepOutputEvent(
                        run_id=self.run_id,
                        payload=StepOutputPayload(
                            output=AgentOutput(type=TEXT_DELTA, payload={"text": event.text}),
                            step_call_id=call_ids.get(event.step_name, ""),
                            step_name=event.step_name,
                        ),
                    )

                elif isinstance(event, StepCompleted):
                    if event.step_name == CLASSIFY_STEP:
                        self.route = event.result.get("route")
                    yield StepResultEvent(
                        run_id=self.run_id,
                        payload=StepResultPayload(
                            step_name=event.step_name,
                            step_call_id=call_ids.get(event.step_name, ""),
                            result=event.result,
                            ended_at=_now_ms(),
                        ),
                    )

                elif isinstance(event, StepFailed):
                    # Keep the first failure; the workflow still converges
                    if failure is None:
                        failure = event.error

                elif isinstance(event, WorkflowOutputEvent):
                    data = event.data
                    self._text = data if isinstance(data, str) else getattr(data, "text", str(data))
            converged = True
        finally:
            if not converged:
                logger.info(f"Chat workflow run {self.run_id} abandoned before completion")
                self._cancelled.set()
            self._enter(WorkflowState.FINISHED)

        if failure is not None:
            logger.error(f"Chat workflow run {self.run_id} failed: {failure}")
            raise failure
        if self._text is None:
            raise ChatWorkflowError("Workflow finished without producing a reply")

        logger.info(f"Chat workflow run {self.run_id} finished (route={self.route})")
        yield FinishEvent(run_id=self.run_id)

    @property
    def text(self) -> str:
        return self._text or ""

    @property
    def result(self) -> dict:
        """Final run result, as sent in the ``result`` frame."""
        return {"status": "success", "result": {"result": self.text}}


class ChatWorkflowRunner:
    """Creates runs from a workflow factory.

    The factory is called once per run with the run's cancellation event,
    so each run gets a fresh workflow wired to stop when the run is abandoned.
    """

    def __init__(self, workflow_factory: Callable[[asyncio.Event], Any]):
        self._workflow_factory = workflow_factory

    def create_run(self, run_input: WorkflowRunInput, run_id: Optional[str] = None) -> ChatWorkflowRun:
        cancelled = asyncio.Event()
        return ChatWorkflowRun(
            self._workflow_factory(cancelled), run_input, run_id=run_id, cancelled=cancelled
        )
