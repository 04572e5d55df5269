"""Chat Workflow: classify the latest turn, then stream exactly one responder."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

from agent_framework import (
    ChatMessage,
    Executor,
    Role,
    WorkflowBuilder,
    WorkflowContext,
    executor,
    handler,
)
from typing_extensions import Never, assert_never

from ..agents.assistant_agent import create_assistant_agent
from ..agents.classifier import IntentClassifier, create_classifier_agent
from ..agents.model_registry import ModelAssignment, ModelRegistry
from ..agents.research_agent import create_research_agent
from ..agents.responders import ClarificationResponder, Responder
from ..agents.writer_agent import create_writer_agent
from ..core.enrichment import enrich_with_document
from ..core.errors import ClassificationError, ResponderError
from ..schemas.common import ChatMessage as TranscriptMessage
from ..schemas.common import WorkflowRunInput
from ..schemas.routing import ClarifyingQuestion, Route, RouteLabel, route_name
from .events import StepCompleted, StepDelta, StepFailed, StepStarted

logger = logging.getLogger(__name__)

# Executor ids double as the step names seen on the wire
PREPARE_STEP = "prepare_conversation"
CLASSIFY_STEP = "classify_intent"
RESEARCH_STEP = "research"
WRITE_STEP = "write"
ASSIST_STEP = "assist"
CLARIFY_STEP = "clarify"

BRANCH_STEPS = [RESEARCH_STEP, WRITE_STEP, ASSIST_STEP, CLARIFY_STEP]


# === Messages passed along edges ===
@dataclass
class Conversation:
    """Enriched conversation converted to agent messages."""

    messages: list[ChatMessage]


@dataclass
class RoutedConversation:
    """Conversation plus the classifier's decision."""

    messages: list[ChatMessage]
    route: RouteLabel


@dataclass
class ChatAgents:
    """The agents one workflow run needs."""

    classifier: Any
    research: Any
    writer: Any
    assistant: Any


def to_agent_messages(messages: list[TranscriptMessage]) -> list[ChatMessage]:
    return [
        ChatMessage(
            Role.USER if msg.role == "user" else Role.ASSISTANT,
            text=msg.content,
        )
        for msg in messages
    ]


# === Executors ===


@executor(id=PREPARE_STEP)
async def prepare_conversation(
    input: WorkflowRunInput, ctx: WorkflowContext[Conversation]
) -> None:
    """Apply document enrichment and send the history to the classifier."""
    enriched = enrich_with_document(input.messages, input.content)
    await ctx.send_message(Conversation(messages=to_agent_messages(enriched)))


class ClassifyIntent(Executor):
    """Runs the intent classifier and forwards the routed conversation."""

    def __init__(self, classifier: IntentClassifier, id: str = CLASSIFY_STEP):
        super().__init__(id=id)
        self._classifier = classifier

    @handler
    async def classify(
        self, conversation: Conversation, ctx: WorkflowContext[RoutedConversation]
    ) -> None:
        started_at = int(time.time() * 1000)
        try:
            route = await self._classifier.classify(conversation.messages)
        except ClassificationError as e:
            logger.error(f"Classification failed: {e}")
            # No step frames and no branch: the run fails right after start
            await ctx.add_event(StepFailed(self.id, e))
            return

        await ctx.add_event(StepStarted(self.id, started_at=started_at))
        await ctx.add_event(StepCompleted(self.id, {"route": route_name(route)}))
        await ctx.send_message(
            RoutedConversation(messages=conversation.messages, route=route)
        )


class ReplyExecutor(Executor):
    """Streams one responder's reply as step deltas and yields the full text.

    With no responder configured the executor echoes the classifier's
    clarifying question. Once ``cancelled`` is set the reply is abandoned
    and the agent stream closed.
    """

    def __init__(
        self,
        responder: Optional[Responder],
        id: str,
        cancelled: Optional[asyncio.Event] = None,
    ):
        super().__init__(id=id)
        self._responder = responder
        self._cancelled = cancelled or asyncio.Event()

    @handler
    async def respond(
        self, routed: RoutedConversation, ctx: WorkflowContext[Never, str]
    ) -> None:
        await ctx.add_event(StepStarted(self.id))

        if self._responder is not None:
            responder = self._responder
        else:
            question = routed.route.text if isinstance(routed.route, ClarifyingQuestion) else ""
            responder = ClarificationResponder(question)

        stream = responder.respond(routed.messages)
        try:
            async for delta in stream:
                if self._cancelled.is_set():
                    logger.info(f"Responder {self.id} stopped: run cancelled")
                    await stream.aclose()
                    return
                await ctx.add_event(StepDelta(self.id, delta))
        except ResponderError as e:
            logger.error(f"Responder {self.id} failed: {e}")
            await ctx.add_event(StepFailed(self.id, e))
            return

        await ctx.add_event(StepCompleted(self.id, {"result": stream.text}))
        await ctx.yield_output(stream.text)


# === Branch selection ===
def select_branch(routed: RoutedConversation, target_ids: list[str]) -> list[str]:
    """Select exactly one responder branch for the route.

    target_ids order: [research, write, assist, clarify]
    """
    research_id, write_id, assist_id, clarify_id = target_ids

    route = routed.route
    match route:
        case Route.RESEARCH:
            return [research_id]
        case Route.WRITE:
            return [write_id]
        case Route.ASSISTANT:
            return [assist_id]
        case ClarifyingQuestion():
            return [clarify_id]
        case _:
            assert_never(route)


# === Agent and workflow factories ===
def create_chat_agents(
    registry: Optional[ModelRegistry] = None,
    models: Optional[ModelAssignment] = None,
) -> ChatAgents:
    """Create the classifier and responder agents.

    Without a registry every agent uses the local AZURE_OPENAI_* deployment
    and ``models`` is ignored.

    Usage:
        create_chat_agents(registry, ModelAssignment(classifier="gpt-4.1-mini"))
    """
    models = models or ModelAssignment()
    return ChatAgents(
        classifier=create_classifier_agent(registry, models.model_for("classifier")),
        research=create_research_agent(registry, models.model_for("research")),
        writer=create_writer_agent(registry, models.model_for("writer")),
        assistant=create_assistant_agent(registry, models.model_for("assistant")),
    )


def create_chat_workflow(agents: ChatAgents, cancelled: Optional[asyncio.Event] = None):
    """Build a fresh chat workflow.

    Workflows are single-run objects; build one per request. Setting
    ``cancelled`` stops whichever responder is streaming.
    """
    classify = ClassifyIntent(IntentClassifier(agents.classifier))
    research = ReplyExecutor(Responder(agents.research), id=RESEARCH_STEP, cancelled=cancelled)
    write = ReplyExecutor(Responder(agents.writer), id=WRITE_STEP, cancelled=cancelled)
    assist = ReplyExecutor(Responder(agents.assistant), id=ASSIST_STEP, cancelled=cancelled)
    clarify = ReplyExecutor(None, id=CLARIFY_STEP, cancelled=cancelled)

    workflow = (
        WorkflowBuilder(
            name="InkSink Chat Workflow",
            description="Routes each chat turn to the research, writer or assistant agent",
        )
        .set_start_executor(prepare_conversation)
        .add_edge(prepare_conversation, classify)
        .add_multi_selection_edge_group(
            classify,
            [research, write, assist, clarify],
            selection_func=select_branch,
        )
        .build()
    )

    return workflow
