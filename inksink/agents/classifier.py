"""Intent classifier that routes a conversation to a responder.

The orchestrator agent answers with a bare route label, or with a clarifying
question when the user's intent is unclear.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Sequence

from ..core.errors import ClassificationError
from ..schemas.routing import RouteLabel, normalize_route_text, parse_route_label, route_name
from .factory import create_agent

if TYPE_CHECKING:
    from agent_framework import ChatAgent, ChatMessage

    from .model_registry import ModelName, ModelRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifierAgentConfig:
    """Configuration for the orchestrator (intent classifier) agent."""

    name: str = "orchestrator-agent"
    description: str = "Decides whether the user wants research, writing or general help"
    instructions: str = """You are the Orchestration Agent for the InkSink writing application. Your only job is to analyze the user's LATEST message and decide which specialized agent should handle it.

## Decision Criteria

### Return "research" when the user wants:
- Factual information, explanations or definitions
- To learn about a topic, concept or subject
- Brainstorming ideas or exploring different angles
- Summaries of events, theories or concepts
- Lists of facts, examples or perspectives
- Research assistance before writing

### Return "write" when the user wants:
- Content creation (blog posts, articles, social media posts)
- Help crafting messages, emails or copy
- Creative writing or storytelling
- To transform research or an existing draft into written content
- Edits to the document they are working on ("make this punchier")

### Return "assistant" when the user wants:
- General conversation, greetings or small talk
- Help using the InkSink application
- General advice that needs neither research nor writing

## Output Format
Return EXACTLY one of these strings, with no quotes, punctuation or explanation:
- research
- write
- assistant

If the user's intent is genuinely unclear, do not return a label. Instead ask ONE short, specific clarifying question that helps them choose between research and writing help.

## Examples

User: "Who was Marie Curie and what did she discover?"
Response: research

User: "Write a blog post about remote work benefits"
Response: write

User: "Give me some ideas for a LinkedIn post about AI"
Response: research

User: "Help me write an email to my team about the new project"
Response: write

User: "Hi! How does this app work?"
Response: assistant

User: "I need help with something"
Response: Could you tell me a bit more? Are you looking for information on a topic, or do you need help writing content?
"""


CONFIG = ClassifierAgentConfig()


def create_classifier_agent(
    registry: Optional["ModelRegistry"] = None,
    model_name: Optional["ModelName"] = None,
) -> "ChatAgent":
    """Create the orchestrator agent used by the intent classifier."""
    return create_agent(CONFIG, registry, model_name)


class IntentClassifier:
    """Classifies a conversation into a RouteLabel.

    Stateless across invocations; the wrapped agent only needs an async
    ``run(messages)`` returning an object with ``text``.
    """

    def __init__(self, agent: Any):
        self._agent = agent

    async def classify(self, messages: Sequence["ChatMessage"]) -> RouteLabel:
        """Run the orchestrator agent once and parse its answer.

        Args:
            messages: Conversation already enriched with document context

        Returns:
            Route for a known label, ClarifyingQuestion otherwise

        Raises:
            ClassificationError: If the agent call fails or returns no text
        """
        try:
            response = await self._agent.run(messages=list(messages))
        except Exception as e:
            raise ClassificationError(f"Intent classification failed: {e}") from e

        raw = getattr(response, "text", None) or ""
        if not normalize_route_text(raw):
            raise ClassificationError("Intent classification returned an empty route")

        label = parse_route_label(raw)
        logger.info(f"Classified conversation as: {route_name(label)[:80]}")
        return label
