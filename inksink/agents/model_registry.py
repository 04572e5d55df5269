"""Azure OpenAI deployments available to the chat agents.

- ModelDeployment: one deployed model and the Key Vault secret holding its key
- ModelRegistry: resolves a model name to client credentials
- ModelAssignment: which model each agent role runs on
- LocalModelSettings: single deployment from AZURE_OPENAI_* variables (local dev)
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from inksink.infrastructure.keyvault import AKV

load_dotenv()

ModelName = Literal["gpt-4.1", "gpt-4.1-mini", "gpt-4.1-nano"]

AgentRole = Literal["classifier", "research", "writer", "assistant", "title"]

OPENAI_ENDPOINT = "https://inksink.cognitiveservices.azure.com/"
OPENAI_KEY_SECRET = "AZURE-OPENAI-API-KEY"

DEFAULT_MODEL: ModelName = "gpt-4.1"
CLASSIFIER_MODEL: ModelName = "gpt-4.1-mini"
TITLE_MODEL: ModelName = "gpt-4.1-nano"


@dataclass(frozen=True)
class ModelDeployment:
    name: str
    deployment_name: str
    secret_name: str = OPENAI_KEY_SECRET
    endpoint: str = OPENAI_ENDPOINT


@dataclass(frozen=True)
class ModelCredentials:
    """What an AzureOpenAIChatClient needs to reach one deployment."""

    deployment_name: str
    endpoint: str
    api_key: str


DEPLOYMENTS: dict[str, ModelDeployment] = {
    deployment.name: deployment
    for deployment in (
        ModelDeployment("gpt-4.1", deployment_name="gpt-4.1"),
        ModelDeployment("gpt-4.1-mini", deployment_name="gpt-4.1-mini"),
        ModelDeployment("gpt-4.1-nano", deployment_name="gpt-4.1-nano"),
    )
}


class LocalModelSettings(BaseSettings):
    """Deployment used by every agent when no registry is configured."""

    model_config = SettingsConfigDict(env_prefix="AZURE_OPENAI_", env_file=".env", extra="ignore")

    api_key: str = ""
    endpoint: str = ""
    deployment_name: str = ""

    def credentials(self) -> ModelCredentials:
        return ModelCredentials(
            deployment_name=self.deployment_name,
            endpoint=self.endpoint,
            api_key=self.api_key,
        )


class ModelRegistry:
    """Resolves model names against the known deployments.

    API keys are read from Key Vault once; create the registry in the app
    lifespan and keep it in app.state.
    """

    def __init__(self, akv: "AKV"):
        secret_names = {deployment.secret_name for deployment in DEPLOYMENTS.values()}
        self._api_keys = {name: akv.get_secret(name) for name in secret_names}

    def credentials(self, model_name: str) -> ModelCredentials:
        """Credentials for a model.

        Raises:
            ValueError: If no deployment exists for ``model_name``
        """
        deployment = DEPLOYMENTS.get(model_name)
        if deployment is None:
            raise ValueError(f"Unknown model: {model_name}")
        return ModelCredentials(
            deployment_name=deployment.deployment_name,
            endpoint=deployment.endpoint,
            api_key=self._api_keys[deployment.secret_name],
        )


class ModelAssignment(BaseModel):
    """Model per agent role. Roles without an override run on ``default``."""

    default: ModelName = DEFAULT_MODEL
    classifier: Optional[ModelName] = None
    title: Optional[ModelName] = None

    def model_for(self, role: AgentRole) -> ModelName:
        if role == "classifier" and self.classifier:
            return self.classifier
        if role == "title" and self.title:
            return self.title
        return self.default


__all__ = [
    "AgentRole",
    "CLASSIFIER_MODEL",
    "DEFAULT_MODEL",
    "DEPLOYMENTS",
    "LocalModelSettings",
    "ModelAssignment",
    "ModelCredentials",
    "ModelDeployment",
    "ModelName",
    "ModelRegistry",
    "TITLE_MODEL",
]
