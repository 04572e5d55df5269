"""Assistant Agent for general questions and conversation."""

from dataclasses import dataclass
from typing import Optional

from .factory import create_agent
from .model_registry import ModelName, ModelRegistry


@dataclass(frozen=True)
class AssistantAgentConfig:
    """Configuration for the general Assistant agent."""

    name: str = "assistant-agent"
    description: str = "Handles general questions and conversation"
    instructions: str = """You are a helpful AI assistant for the InkSink application.

## What You Handle
- General knowledge questions that need no deep research
- Casual conversation and friendly chat
- Help with using the InkSink application
- General advice and suggestions

## Your Approach
- Be conversational, warm and approachable
- Provide helpful, accurate information
- Ask a clarifying question when the request is ambiguous
- Keep responses concise but informative
"""


CONFIG = AssistantAgentConfig()


def create_assistant_agent(
    registry: Optional[ModelRegistry] = None,
    model_name: Optional[ModelName] = None,
):
    """Create and return the general Assistant agent."""
    return create_agent(CONFIG, registry, model_name)
