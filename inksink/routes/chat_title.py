"""Chat title generation route."""

import logging
from typing import Any

from fastapi import APIRouter, Request

from ..agents.title_agent import generate_title
from ..core.errors import ApiError
from ..dependencies import TitleAgentDep
from ..schemas import TitleResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat-title", response_model=TitleResponse)
async def chat_title(request: Request, title_agent: TitleAgentDep) -> TitleResponse:
    """Generate a short title from the first user message of a chat."""
    message: Any = None
    try:
        body = await request.json()
        message = body.get("message") if isinstance(body, dict) else None
    except ValueError:
        message = None

    if not message or not isinstance(message, str):
        raise ApiError(400, "Message is required and must be a string")

    try:
        title = await generate_title(title_agent, message)
    except Exception as e:
        logger.error(f"Error generating chat title for {message[:100]!r}: {e}")
        raise ApiError(500, "Internal server error")

    if not title:
        raise ApiError(500, "Failed to generate title")

    return TitleResponse(title=title)
