"""Pydantic schemas for chat streaming, titles and chat records."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .common import ChatMessage


class ChatRequest(BaseModel):
    """Body of the chat streaming endpoints."""

    messages: List[ChatMessage] = Field(..., description="Full conversation history")
    content: Optional[str] = Field(None, description="Snapshot of the document being edited")


class TitleResponse(BaseModel):
    """Generated chat title."""

    title: str


class ChatCreate(BaseModel):
    """Schema for creating a chat record."""

    document_id: str = Field(..., description="Document the chat belongs to")
    title: str = Field("New Chat", description="Chat title")
    messages: List[ChatMessage] = Field(default_factory=list)


class ChatUpdate(BaseModel):
    """Schema for updating a chat record."""

    title: Optional[str] = Field(None, description="New chat title")
    messages: Optional[List[ChatMessage]] = Field(None, description="Full replacement transcript")


class ChatMetadata(BaseModel):
    """Chat record without messages."""

    id: str
    document_id: str
    title: str
    created_at: str = Field(..., description="ISO8601 creation timestamp")
    updated_at: str = Field(..., description="ISO8601 last modification timestamp")


class ChatRecord(ChatMetadata):
    """Chat record with its full transcript."""

    messages: List[ChatMessage] = Field(default_factory=list)
