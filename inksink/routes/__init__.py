"""API routes for the InkSink chat service."""

from . import chat, chat_title, chats, user

__all__ = ["chat", "chat_title", "chats", "user"]
