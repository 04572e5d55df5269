"""Chat session: binds a document's saved chats to a streaming client."""

import logging
from typing import Optional, Sequence

from ..schemas.chat import ChatMetadata, ChatRecord
from ..schemas.common import ChatMessage
from .api import ChatApiClient
from .stream import ChatStreamClient

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Chat"
RECENT_CHATS_LIMIT = 10


class ChatSession:
    """Loads and persists the chats of one document.

    Persistence is best effort: failures are logged and never reach the
    chat UI. The final transcript is saved once per completed send through
    the stream client's ``on_finish_streaming`` hook.
    """

    def __init__(
        self,
        document_id: Optional[str],
        api: ChatApiClient,
        stream: ChatStreamClient,
        recent_limit: int = RECENT_CHATS_LIMIT,
    ):
        self.document_id = document_id
        self.api = api
        self.stream = stream
        self.recent_limit = recent_limit
        self.current_chat: Optional[ChatMetadata] = None
        self.recent_chats: list[ChatMetadata] = []
        stream.on_finish_streaming = self.persist

    @property
    def messages(self) -> list[ChatMessage]:
        return self.stream.messages

    async def send_message(self, text: str) -> None:
        await self.stream.send_message(text)

    async def load(self) -> None:
        """Load the most recent chat for the document and the recent list."""
        if not self.document_id:
            self.current_chat = None
            return
        try:
            latest = await self.api.get_most_recent_chat(self.document_id)
        except Exception as e:
            logger.error(f"Failed to load chat for document {self.document_id}: {e}")
            latest = None
        if latest is not None:
            self._set_current(latest)
        await self.load_recent_chats()

    async def load_recent_chats(self) -> None:
        if not self.document_id:
            return
        try:
            chats = await self.api.list_chats(self.document_id)
        except Exception as e:
            logger.error(f"Failed to load recent chats: {e}")
            return
        self.recent_chats = chats[: self.recent_limit]

    async def persist(self, final_messages: Sequence[ChatMessage]) -> None:
        """Save the transcript: update the current chat or create a new one."""
        if not self.document_id or not final_messages:
            return

        try:
            if self.current_chat is not None:
                await self.api.update_chat(self.current_chat.id, messages=final_messages)
                return

            title = await self._title_for(final_messages)
            record = await self.api.create_chat(self.document_id, final_messages, title=title)
            self.current_chat = ChatMetadata.model_validate(record.model_dump(exclude={"messages"}))
            await self.load_recent_chats()
        except Exception as e:
            logger.error(
                f"Failed to save {len(final_messages)} messages for document {self.document_id}: {e}"
            )

    async def _title_for(self, messages: Sequence[ChatMessage]) -> str:
        first_user = next((m for m in messages if m.role == "user"), None)
        if first_user is None or not first_user.content:
            return DEFAULT_TITLE
        try:
            return await self.api.generate_title(first_user.content)
        except Exception as e:
            logger.error(f"Failed to generate chat title: {e}")
            return DEFAULT_TITLE

    def new_chat(self) -> None:
        self.current_chat = None
        self.stream.set_messages([])

    async def select_chat(self, chat_id: str) -> None:
        try:
            chat = await self.api.get_chat(chat_id)
        except Exception as e:
            logger.error(f"Failed to select chat {chat_id}: {e}")
            return
        if chat is not None:
            self._set_current(chat)

    async def delete_chat(self, chat_id: str) -> None:
        try:
            await self.api.delete_chat(chat_id)
        except Exception as e:
            logger.error(f"Failed to delete chat {chat_id}: {e}")
            return
        if self.current_chat is not None and self.current_chat.id == chat_id:
            self.new_chat()
        await self.load_recent_chats()

    def _set_current(self, chat: ChatRecord) -> None:
        self.current_chat = ChatMetadata.model_validate(chat.model_dump(exclude={"messages"}))
        self.stream.set_messages(chat.messages)
