"""Responder wrappers exposing agent output as a token stream."""

import logging
from typing import Any, AsyncGenerator, AsyncIterator, Optional, Sequence

from agent_framework import ChatMessage

from ..core.errors import ResponderError

logger = logging.getLogger(__name__)


class TokenStream:
    """Ordered, finite, non-restartable sequence of text deltas.

    Iterate with ``async for``; ``text`` holds the concatenated output once
    the iteration has completed.
    """

    def __init__(self, source: AsyncIterator[str], name: str = "responder"):
        self._source = source
        self._name = name
        self._parts: list[str] = []
        self._started = False
        self._done = False
        self._iterator: Optional[AsyncGenerator[str, None]] = None

    def __aiter__(self) -> AsyncIterator[str]:
        if self._started:
            raise RuntimeError(f"{self._name} stream can only be consumed once")
        self._started = True
        self._iterator = self._iterate()
        return self._iterator

    async def _iterate(self) -> AsyncIterator[str]:
        try:
            async for delta in self._source:
                if delta:
                    self._parts.append(delta)
                    yield delta
        except ResponderError:
            raise
        except Exception as e:
            raise ResponderError(f"{self._name} failed: {e}") from e
        self._done = True

    async def aclose(self) -> None:
        """Stop early and close the source; ``text`` stays unavailable."""
        if self._iterator is not None:
            await self._iterator.aclose()
        close = getattr(self._source, "aclose", None)
        if close is not None:
            await close()

    @property
    def done(self) -> bool:
        return self._done

    @property
    def text(self) -> str:
        """Full text, available after the stream completes."""
        if not self._done:
            raise RuntimeError(f"{self._name} stream has not completed")
        return "".join(self._parts)

    @classmethod
    def from_text(cls, text: str, name: str = "responder") -> "TokenStream":
        """A stream that emits ``text`` as a single delta."""

        async def single() -> AsyncIterator[str]:
            yield text

        return cls(single(), name=name)


class Responder:
    """Streams a reply from a chat agent.

    The wrapped agent only needs ``run_stream(messages=...)`` yielding updates
    that expose ``text``.
    """

    def __init__(self, agent: Any, name: Optional[str] = None):
        self._agent = agent
        self.name = name or getattr(agent, "name", None) or "responder"

    def respond(self, messages: Sequence[ChatMessage]) -> TokenStream:
        """Start generating a reply for the (enriched) conversation."""

        async def deltas() -> AsyncIterator[str]:
            updates = self._agent.run_stream(messages=list(messages))
            try:
                async for update in updates:
                    text = getattr(update, "text", None)
                    if text:
                        yield text
            finally:
                close = getattr(updates, "aclose", None)
                if close is not None:
                    await close()

        logger.info(f"Responder {self.name} streaming reply")
        return TokenStream(deltas(), name=self.name)


class ClarificationResponder:
    """Pass-through responder that echoes the classifier's clarifying question."""

    name = "clarification"

    def __init__(self, question: str):
        self._question = question

    def respond(self, messages: Sequence[ChatMessage]) -> TokenStream:
        return TokenStream.from_text(self._question, name=self.name)
