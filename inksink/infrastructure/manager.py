"""Async chat store with PostgreSQL + Redis write-through caching."""

import logging
import uuid
from typing import Any, Dict, List, Optional

from .postgresql import AsyncPostgreSQLBackend
from .redis import AsyncRedisBackend

logger = logging.getLogger(__name__)


class AsyncChatStore:
    """Chat record storage behind the save/load contract.

    This store orchestrates PostgreSQL (primary storage) and Redis (cache):
    - Write-through: Write to PostgreSQL first, then refresh or drop cache entries
    - Cache-aside reads: Try Redis first, fallback to PostgreSQL on miss
    """

    def __init__(self) -> None:
        self.backend: Optional[AsyncPostgreSQLBackend] = None
        self.cache: Optional[AsyncRedisBackend] = None
        self._use_cache: bool = False

    async def initialize(
        self,
        postgres_connection_string: str,
        redis_host: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_port: int = 6380,
        redis_ssl: bool = True,
        redis_ttl: int = 1800,
    ) -> None:
        """Initialize database connections.

        Args:
            postgres_connection_string: PostgreSQL connection string
            redis_host: Redis server hostname (optional, for caching)
            redis_password: Redis password (optional)
            redis_port: Redis port (default: 6380)
            redis_ssl: Enable SSL/TLS (default: True)
            redis_ttl: TTL for Redis keys in seconds (default: 1800)
        """
        # Initialize PostgreSQL (required)
        self.backend = AsyncPostgreSQLBackend()
        await self.backend.connect(postgres_connection_string)

        # Initialize Redis (optional cache)
        if redis_host and redis_password:
            try:
                self.cache = AsyncRedisBackend()
                await self.cache.connect(
                    redis_host=redis_host,
                    redis_password=redis_password,
                    redis_port=redis_port,
                    redis_ssl=redis_ssl,
                    redis_ttl=redis_ttl,
                )
                self._use_cache = True
                logger.info("Redis cache enabled")
            except Exception as e:
                logger.warning(f"Redis cache unavailable, continuing without cache: {e}")
                self.cache = None
                self._use_cache = False
        else:
            logger.info("Redis not configured, running without cache")

    async def close(self) -> None:
        """Close all database connections."""
        if self.backend:
            await self.backend.close()
        if self.cache:
            await self.cache.close()

    def _require_backend(self) -> AsyncPostgreSQLBackend:
        if not self.backend:
            raise RuntimeError("Database not initialized")
        return self.backend

    @property
    def _cache_ready(self) -> bool:
        return bool(self._use_cache and self.cache and self.cache.is_available())

    async def list_chats(self, document_id: str, user_id: str) -> List[Dict[str, Any]]:
        """Chat metadata for a document, most recent first."""
        backend = self._require_backend()

        if self._cache_ready:
            cached = await self.cache.get_chat_list(document_id, user_id)
            if cached is not None:
                return cached
            logger.info(f"Cache miss for document {document_id}, loading from PostgreSQL")

        chats = await backend.list_chats(document_id, user_id)

        if self._cache_ready:
            await self.cache.set_chat_list(document_id, user_id, chats)

        return chats

    async def load_most_recent_chat(
        self, document_id: str, user_id: str
    ) -> Optional[Dict[str, Any]]:
        """Initial snapshot for a document: its most recently updated chat."""
        return await self._require_backend().get_most_recent_chat(document_id, user_id)

    async def get_chat(self, chat_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        backend = self._require_backend()

        if self._cache_ready:
            cached = await self.cache.get_chat(chat_id)
            # Cached records carry their owner
            if cached is not None and cached.get("user_id") == user_id:
                return cached

        chat = await backend.get_chat(chat_id, user_id)

        if chat and self._cache_ready:
            await self.cache.set_chat(chat)

        return chat

    async def create_chat(
        self,
        document_id: str,
        user_id: str,
        title: str,
        messages: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        backend = self._require_backend()
        chat = await backend.create_chat(str(uuid.uuid4()), document_id, user_id, title, messages)
        logger.info(f"Created chat {chat['id']} for document {document_id}")

        if self._cache_ready:
            await self.cache.set_chat(chat)
            await self.cache.invalidate(user_id, document_id=document_id)

        return chat

    async def update_chat(
        self,
        chat_id: str,
        user_id: str,
        title: Optional[str] = None,
        messages: Optional[List[Dict[str, Any]]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Write the final snapshot of a chat; None if it does not exist."""
        backend = self._require_backend()
        chat = await backend.update_chat(chat_id, user_id, title=title, messages=messages)

        if chat and self._cache_ready:
            await self.cache.set_chat(chat)
            await self.cache.invalidate(user_id, document_id=chat["document_id"])

        return chat

    async def delete_chat(self, chat_id: str, user_id: str) -> bool:
        backend = self._require_backend()
        existing = await backend.get_chat(chat_id, user_id)
        if existing is None:
            return False

        deleted = await backend.delete_chat(chat_id, user_id)

        if self._cache_ready:
            await self.cache.invalidate(
                user_id, chat_id=chat_id, document_id=existing["document_id"]
            )

        return deleted
