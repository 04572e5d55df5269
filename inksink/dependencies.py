"""FastAPI dependency injection functions."""

import asyncio
import base64
import json
import logging
from typing import Annotated, Any, Optional

from fastapi import Depends, Header, Request

from .agents.model_registry import ModelAssignment, ModelRegistry
from .agents.title_agent import create_title_agent
from .config import Settings, get_settings
from .core.errors import ApiError
from .infrastructure import AsyncChatStore, CreditService
from .schemas import UserInfo
from .workflows import ChatWorkflowRunner, create_chat_agents, create_chat_workflow

logger = logging.getLogger(__name__)


async def get_chat_store(request: Request) -> AsyncChatStore:
    """Get the AsyncChatStore from app state."""
    return request.app.state.chat_store


async def get_credit_service(request: Request) -> CreditService:
    """Get the CreditService from app state."""
    return request.app.state.credit_service


def _get_model_registry(request: Request) -> Optional[ModelRegistry]:
    # None means agents read LocalModelSettings (local dev)
    return getattr(request.app.state, "model_registry", None)


async def get_current_user(
    settings: Annotated[Settings, Depends(get_settings)],
    x_ms_client_principal_id: Annotated[str | None, Header()] = None,
    x_ms_client_principal_name: Annotated[str | None, Header()] = None,
    x_ms_client_principal: Annotated[str | None, Header()] = None,
) -> UserInfo:
    """Extract user information from Azure Easy Auth SSO headers.

    Supports different modes based on CHAT_HISTORY_MODE:
    - local_psql, local_redis: Use test credentials from env
    - postgres, redis: Use real SSO headers from Azure Easy Auth

    Args:
        settings: Application settings
        x_ms_client_principal_id: Azure AD client principal ID header
        x_ms_client_principal_name: Azure AD client principal name header
        x_ms_client_principal: Base64-encoded client principal JSON header

    Returns:
        UserInfo with user details
    """
    mode = settings.chat_history_mode

    if settings.is_local_mode:
        return UserInfo(
            user_id=settings.local_test_client_id,
            user_name=settings.local_test_username,
            first_name=settings.local_test_username.split()[0] if settings.local_test_username else "User",
            principal_name=None,
            is_authenticated=True,
            mode=mode,
        )

    display_name = "Unknown user"
    first_name = "there"

    if x_ms_client_principal:
        try:
            decoded_principal = json.loads(base64.b64decode(x_ms_client_principal).decode("utf-8"))
            # Find 'name' claim in the claims array
            for claim in decoded_principal.get("claims", []):
                if claim.get("typ") == "name":
                    display_name = claim.get("val", "Unknown user")
                    first_name = display_name.split()[0] if display_name else "there"
                    break
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(f"Could not decode client principal header: {e}")

    return UserInfo(
        user_id=x_ms_client_principal_id or "unknown",
        user_name=display_name,
        first_name=first_name,
        principal_name=x_ms_client_principal_name,
        is_authenticated=bool(x_ms_client_principal_id and x_ms_client_principal),
        mode=mode,
    )


async def require_user(
    current_user: Annotated[UserInfo, Depends(get_current_user)],
) -> UserInfo:
    """Current user, or 401 when the request carries no identity."""
    if not current_user.is_authenticated:
        raise ApiError(401, "Unauthorized")
    return current_user


def _model_assignment(settings: Settings) -> ModelAssignment:
    return ModelAssignment(
        default=settings.default_model,
        classifier=settings.classifier_model,
        title=settings.title_model,
    )


async def get_workflow_runner(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ChatWorkflowRunner:
    """Runner that builds a fresh chat workflow for each run."""
    registry = _get_model_registry(request)
    models = _model_assignment(settings)

    def build_workflow(cancelled: asyncio.Event):
        agents = create_chat_agents(registry, models)
        return create_chat_workflow(agents, cancelled)

    return ChatWorkflowRunner(build_workflow)


async def get_title_agent(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> Any:
    registry = _get_model_registry(request)
    return create_title_agent(registry, _model_assignment(settings).model_for("title"))


# Type aliases for dependency injection
ChatStoreDep = Annotated[AsyncChatStore, Depends(get_chat_store)]
CreditServiceDep = Annotated[CreditService, Depends(get_credit_service)]
CurrentUserDep = Annotated[UserInfo, Depends(get_current_user)]
AuthenticatedUserDep = Annotated[UserInfo, Depends(require_user)]
WorkflowRunnerDep = Annotated[ChatWorkflowRunner, Depends(get_workflow_runner)]
TitleAgentDep = Annotated[Any, Depends(get_title_agent)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
