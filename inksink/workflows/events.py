"""Custom workflow events emitted by the chat workflow executors."""

from typing import Any, Optional

from agent_framework import WorkflowEvent


class ChatStepEvent(WorkflowEvent):
    """Base event carrying the id of the executor (step) that emitted it."""

    def __init__(self, step_name: str, data: Optional[Any] = None):
        super().__init__(data)
        self.step_name = step_name


class StepStarted(ChatStepEvent):
    """A step began its work.

    ``started_at`` (epoch ms) is set when the step reports its start late.
    """

    def __init__(self, step_name: str, started_at: Optional[int] = None):
        super().__init__(step_name)
        self.started_at = started_at


class StepDelta(ChatStepEvent):
    """A text delta streamed by a responder step."""

    def __init__(self, step_name: str, text: str):
        super().__init__(step_name, text)
        self.text = text


class StepCompleted(ChatStepEvent):
    """A step finished; ``result`` is the step's output payload."""

    def __init__(self, step_name: str, result: dict):
        super().__init__(step_name, result)
        self.result = result


class StepFailed(ChatStepEvent):
    """A step failed; the run ends with ``error`` once the workflow converges."""

    def __init__(self, step_name: str, error: Exception):
        super().__init__(step_name, str(error))
        self.error = error
