"""Observability middleware for agent execution.

Logs agent invocation and completion with model name and execution time.
Streaming results are wrapped so completion is logged once the last update
has been consumed.
"""

import logging
from datetime import datetime, timezone

from agent_framework import agent_middleware

logger = logging.getLogger(__name__)


def _extract_model_name(agent) -> str | None:
    """Extract model/deployment name from agent's chat client."""
    chat_client = getattr(agent, "chat_client", None)
    return getattr(chat_client, "deployment_name", None)


def _elapsed_ms(start_time: datetime) -> int:
    return int((datetime.now(timezone.utc) - start_time).total_seconds() * 1000)


@agent_middleware
async def observability_agent_middleware(context, next):  # type: ignore
    """Log when an agent starts and finishes execution."""
    agent_name = context.agent.name
    model_name = _extract_model_name(context.agent)
    start_time = datetime.now(timezone.utc)

    logger.info(f"Agent invoked: {agent_name} (model={model_name})")

    await next(context)

    original_result = context.result

    if hasattr(original_result, "__anext__"):
        # Streaming result - wrap generator to log after the final update
        async def wrapped_generator():
            update_count = 0
            async for item in original_result:
                update_count += 1
                yield item
            logger.info(
                f"Agent finished: {agent_name} (model={model_name}, "
                f"updates={update_count}, execution_time_ms={_elapsed_ms(start_time)})"
            )

        context.result = wrapped_generator()
    else:
        logger.info(
            f"Agent finished: {agent_name} (model={model_name}, "
            f"execution_time_ms={_elapsed_ms(start_time)})"
        )
