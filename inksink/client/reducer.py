"""Transcript reducer: folds stream updates into the chat transcript."""

from typing import Optional, Sequence

from ..schemas.common import ChatMessage
from .decoder import FinalText, StreamFailure, StreamUpdate, TextDelta


def reduce_transcript(messages: Sequence[ChatMessage], update: StreamUpdate) -> list[ChatMessage]:
    """Return a new transcript with ``update`` applied.

    A delta is appended to the trailing assistant message (or starts one).
    A non-empty final text replaces the trailing assistant message's content,
    so applying the same final text twice changes nothing.
    """
    updated = list(messages)

    if isinstance(update, TextDelta):
        if not update.text:
            return updated
        if updated and updated[-1].role == "assistant":
            last = updated[-1]
            updated[-1] = last.model_copy(update={"content": last.content + update.text})
        else:
            updated.append(ChatMessage(role="assistant", content=update.text))
        return updated

    if isinstance(update, FinalText):
        if not update.text:
            return updated
        if updated and updated[-1].role == "assistant":
            updated[-1] = updated[-1].model_copy(update={"content": update.text})
        else:
            updated.append(ChatMessage(role="assistant", content=update.text))
        return updated

    # StreamFailure does not touch the transcript
    return updated


class TranscriptReducer:
    """Owns the transcript plus the ``thinking`` and ``error`` flags for one chat."""

    def __init__(self, messages: Optional[Sequence[ChatMessage]] = None):
        self.messages: list[ChatMessage] = list(messages or [])
        self.error: Optional[str] = None
        self._in_flight = False
        self._started = False

    @property
    def thinking(self) -> bool:
        """A send is in flight, nothing has arrived yet and the user spoke last."""
        return (
            self._in_flight
            and not self._started
            and bool(self.messages)
            and self.messages[-1].role == "user"
        )

    def begin_turn(self, content: str) -> ChatMessage:
        """Append the user's message and arm ``thinking``."""
        message = ChatMessage(role="user", content=content)
        self.messages = [*self.messages, message]
        self.error = None
        self._in_flight = True
        self._started = False
        return message

    def apply(self, update: StreamUpdate) -> None:
        if isinstance(update, StreamFailure):
            self.error = update.message
            return
        if update.text:
            self._started = True
        self.messages = reduce_transcript(self.messages, update)

    def fail(self, message: str) -> None:
        self.error = message

    def end_turn(self) -> None:
        self._in_flight = False

    def replace(self, messages: Sequence[ChatMessage]) -> None:
        self.messages = list(messages)
        self.error = None
