"""Client-side chat streaming: send a message and fold the SSE reply in."""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Sequence

import httpx

from ..schemas.common import ChatMessage
from .api import error_message
from .decoder import SSEDecoder, SSEFrame, parse_frame
from .reducer import TranscriptReducer

logger = logging.getLogger(__name__)

FinishCallback = Callable[[list[ChatMessage]], Any]


class ChatStreamError(Exception):
    """The chat endpoint rejected the request or the connection failed."""


class ChatStreamClient:
    """Sends chat turns to the streaming endpoint, one at a time.

    Usage:
        async with httpx.AsyncClient(base_url="http://localhost:8000") as http:
            chat = ChatStreamClient(http, content=document_text)
            await chat.send_message("Write a blog intro about remote work")
            print(chat.messages[-1].content)
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        endpoint: str = "/api/chat",
        content: Optional[str] = None,
        initial_messages: Optional[Sequence[ChatMessage]] = None,
        on_finish_streaming: Optional[FinishCallback] = None,
    ):
        self._http = http
        self.endpoint = endpoint
        self.content = content
        self.on_finish_streaming = on_finish_streaming
        self._reducer = TranscriptReducer(initial_messages)
        self._request: Optional[asyncio.Task] = None
        self._aborted = False

    @property
    def messages(self) -> list[ChatMessage]:
        return self._reducer.messages

    @property
    def error(self) -> Optional[str]:
        return self._reducer.error

    @property
    def is_loading(self) -> bool:
        return self._request is not None and not self._aborted

    @property
    def is_thinking(self) -> bool:
        return self._reducer.thinking

    async def send_message(self, text: str) -> None:
        """Send one user turn and stream the assistant reply into ``messages``.

        Blank text and calls made while a send is in flight (including its
        ``on_finish_streaming`` hook) are ignored.
        Errors end up in ``error``; nothing is raised to the caller.
        """
        if not text or not text.strip():
            return
        if self._request is not None:
            logger.debug("Send ignored: a message is already streaming")
            return

        self._reducer.begin_turn(text)
        payload = {
            "messages": [m.to_payload() for m in self._reducer.messages],
            "content": self.content,
        }
        self._aborted = False
        self._request = asyncio.create_task(self._stream(payload))

        try:
            await self._request
        except asyncio.CancelledError:
            if not self._aborted:
                raise
            logger.info("Chat stream stopped")
        except Exception as e:
            logger.error(f"Chat stream failed: {e}")
            self._reducer.fail(str(e) or "Request failed")
        finally:
            self._reducer.end_turn()
            try:
                # Sends stay blocked until the finish hook (persistence) is done
                await self._notify_finished()
            finally:
                self._request = None

    async def _stream(self, payload: dict) -> None:
        decoder = SSEDecoder()
        try:
            async with self._http.stream("POST", self.endpoint, json=payload) as response:
                if response.is_error:
                    await response.aread()
                    raise ChatStreamError(error_message(response))

                async for chunk in response.aiter_bytes():
                    self._apply(decoder.feed(chunk))
        except httpx.HTTPError as e:
            raise ChatStreamError(str(e) or "Request failed") from e

        self._apply(decoder.close())

    def _apply(self, frames: list[SSEFrame]) -> None:
        for frame in frames:
            update = parse_frame(frame)
            if update is not None:
                self._reducer.apply(update)

    async def _notify_finished(self) -> None:
        if self.on_finish_streaming is None:
            return
        result = self.on_finish_streaming(list(self._reducer.messages))
        if inspect.isawaitable(result):
            await result

    def stop_streaming(self) -> None:
        """Abort the in-flight send, keeping whatever text already arrived."""
        if self._request is not None and not self._request.done():
            self._aborted = True
            self._request.cancel()
        self._reducer.end_turn()

    def reset_chat(self) -> None:
        self.stop_streaming()
        self._reducer.replace([])

    def set_messages(self, messages: Sequence[ChatMessage]) -> None:
        self._reducer.replace(messages)
