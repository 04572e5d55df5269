"""Title Agent that names a chat from its first user message."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from agent_framework import ChatMessage, Role

from .factory import create_agent
from .model_registry import ModelName, ModelRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TitleAgentConfig:
    """Configuration for the Title agent."""

    name: str = "title-agent"
    description: str = "Generates concise chat titles"
    instructions: str = """You are a chat title generation specialist. Create a concise, descriptive title for a chat conversation based on its first message.

Guidelines:
- 3-8 words
- Capture the main topic or intent
- Clear, simple language without special characters or emojis
- Title Case

Examples: "Project Planning Discussion", "Marketing Strategy Ideas", "Content Creation Help"

Return only the title text. No quotes, no explanations.
"""


CONFIG = TitleAgentConfig()


def create_title_agent(
    registry: Optional[ModelRegistry] = None,
    model_name: Optional[ModelName] = None,
):
    """Create and return the Title agent."""
    return create_agent(CONFIG, registry, model_name)


async def generate_title(agent: Any, message: str) -> str:
    """Generate a title for a chat from its first user message.

    Returns:
        The stripped title, possibly empty
    """
    response = await agent.run(messages=[ChatMessage(Role.USER, text=message)])
    title = (getattr(response, "text", None) or "").strip()
    logger.info(f"Generated chat title: {title!r}")
    return title
