"""Shared types for conversation history and workflow input."""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ChatRole = Literal["user", "assistant"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChatMessage(BaseModel):
    """A single role-tagged turn of the transcript."""

    model_config = ConfigDict(populate_by_name=True)

    role: ChatRole
    content: str
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")

    def to_payload(self) -> dict:
        """Request payload form (role and content only)."""
        return {"role": self.role, "content": self.content}

    def to_record(self) -> dict:
        """Persisted form, timestamps as ISO8601."""
        return self.model_dump(mode="json", by_alias=True)


class WorkflowRunInput(BaseModel):
    """Standard input for one chat workflow run."""

    model_config = ConfigDict(frozen=True)

    messages: list[ChatMessage] = Field(default_factory=list)
    content: Optional[str] = None  # Snapshot of the document being edited
