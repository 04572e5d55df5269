"""Builds the ChatAgent behind each chat role.

With a ModelRegistry the agent runs on the named deployment; without one
every agent shares the AZURE_OPENAI_* deployment (local dev).
"""

from typing import Optional, Protocol

from agent_framework import ChatAgent
from agent_framework.azure import AzureOpenAIChatClient

from .middleware.observability import observability_agent_middleware
from .model_registry import LocalModelSettings, ModelCredentials, ModelName, ModelRegistry


class AgentConfig(Protocol):
    name: str
    description: str
    instructions: str


def resolve_credentials(
    registry: Optional[ModelRegistry], model_name: Optional[ModelName]
) -> ModelCredentials:
    """Raises ValueError if a registry is given without a model name."""
    if registry is None:
        return LocalModelSettings().credentials()
    if model_name is None:
        raise ValueError("model_name is required when registry is provided")
    return registry.credentials(model_name)


def create_agent(
    config: AgentConfig,
    registry: Optional[ModelRegistry] = None,
    model_name: Optional[ModelName] = None,
) -> ChatAgent:
    """Create a ChatAgent from an agent config dataclass."""
    credentials = resolve_credentials(registry, model_name)
    chat_client = AzureOpenAIChatClient(
        api_key=credentials.api_key,
        endpoint=credentials.endpoint,
        deployment_name=credentials.deployment_name,
    )
    return ChatAgent(
        name=config.name,
        description=config.description,
        instructions=config.instructions,
        chat_client=chat_client,
        middleware=[observability_agent_middleware],
    )
