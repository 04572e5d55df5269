"""Chat streaming API routes (SSE)."""

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from ..core.errors import ApiError
from ..core.sse import SSE_HEADERS, stream_sse
from ..dependencies import (
    AuthenticatedUserDep,
    CreditServiceDep,
    SettingsDep,
    WorkflowRunnerDep,
)
from ..infrastructure import CreditServiceError
from ..schemas import ChatRequest, WorkflowRunInput
from ..workflows import ChatWorkflowRunner

logger = logging.getLogger(__name__)

router = APIRouter()

INSUFFICIENT_CREDITS = "Insufficient credits. Please purchase more credits to continue."


async def parse_run_input(request: Request) -> WorkflowRunInput:
    """Validate the chat body into a workflow run input.

    Raises:
        ApiError: 400 for invalid JSON, a missing messages array or bad items
    """
    try:
        body: Any = await request.json()
    except ValueError:
        raise ApiError(400, "Invalid JSON body")

    if not isinstance(body, dict) or not isinstance(body.get("messages"), list):
        raise ApiError(400, "messages array required")

    try:
        chat_request = ChatRequest.model_validate(body)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ApiError(400, f"Invalid {location}: {first['msg']}")

    return WorkflowRunInput(messages=chat_request.messages, content=chat_request.content)


def sse_response(runner: ChatWorkflowRunner, run_input: WorkflowRunInput, on_success=None) -> StreamingResponse:
    run = runner.create_run(run_input)
    logger.info(f"Streaming run {run.run_id} ({len(run_input.messages)} messages)")
    return StreamingResponse(
        stream_sse(run, on_success=on_success),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.post("/chat")
async def chat(
    request: Request,
    current_user: AuthenticatedUserDep,
    credit_service: CreditServiceDep,
    runner: WorkflowRunnerDep,
    settings: SettingsDep,
) -> StreamingResponse:
    """Stream a reply for the conversation, charging one credit on success.

    Returns:
        SSE stream: open, message*, result | error, close
    """
    user_id = current_user.user_id

    try:
        credits = await credit_service.get_credits(user_id)
    except CreditServiceError as e:
        logger.error(f"Credit lookup failed for user {user_id}: {e}")
        raise ApiError(400, e.message)

    if credits < settings.credits_per_message:
        raise ApiError(402, INSUFFICIENT_CREDITS)

    run_input = await parse_run_input(request)

    async def deduct_credit() -> None:
        await credit_service.deduct_credit(user_id, credits)

    return sse_response(runner, run_input, on_success=deduct_credit)


@router.post("/stream")
async def stream(request: Request, runner: WorkflowRunnerDep) -> StreamingResponse:
    """Development endpoint: same pipeline without auth or credit checks."""
    run_input = await parse_run_input(request)
    return sse_response(runner, run_input)
