"""Server-sent event framing for chat workflow runs."""

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Union

from ..schemas.events import dump_stream_event

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Content-Type": "text/event-stream; charset=utf-8",
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Nginx
}

OK_DATA = {"ok": True}


def format_sse_event(event_type: str, data: Union[dict, str]) -> str:
    """Format data as an SSE event string.

    Args:
        event_type: The SSE event type (e.g., 'open', 'message', 'close')
        data: Dictionary to JSON serialize, or text sent as-is (one
            ``data:`` line per line of text)

    Returns:
        Formatted SSE event string
    """
    payload = data if isinstance(data, str) else json.dumps(data, ensure_ascii=False)
    lines = "".join(f"data: {line}\n" for line in payload.split("\n"))
    return f"event: {event_type}\n{lines}\n"


async def stream_sse(
    run: Any,
    on_success: Optional[Callable[[], Awaitable[Any]]] = None,
) -> AsyncIterator[str]:
    """Encode one workflow run as SSE frames.

    Frames: ``open``, one ``message`` per stream event, ``result`` on
    success, ``error`` on failure and always ``close``. ``on_success`` runs
    after the result frame; its failures are logged, never sent.

    Args:
        run: A ChatWorkflowRun (``stream()`` and ``result``)
        on_success: Optional callback, e.g. credit deduction
    """
    yield format_sse_event("open", OK_DATA)

    try:
        async for event in run.stream():
            yield format_sse_event("message", dump_stream_event(event))

        yield format_sse_event("result", run.result)

        if on_success is not None:
            try:
                await on_success()
            except Exception as e:
                logger.error(f"Post-stream callback failed: {e}")
    except asyncio.CancelledError:
        # Client went away; nothing more can be delivered
        logger.info("SSE stream cancelled by client")
        raise
    except Exception as e:
        logger.error(f"Chat stream failed: {e}")
        yield format_sse_event("error", {"message": str(e) or "stream error"})

    yield format_sse_event("close", OK_DATA)
