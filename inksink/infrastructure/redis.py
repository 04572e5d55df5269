"""Async Redis cache backend for chat records."""

import json
import logging
from typing import Any, Dict, List, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)


def _chat_key(chat_id: str) -> str:
    return f"chat:{chat_id}"


def _document_key(document_id: str, user_id: str) -> str:
    return f"chat:document:{document_id}:{user_id}:chats"


class AsyncRedisBackend:
    """Async Redis cache for chat records and per-document chat lists.

    Every method degrades to a cache miss (None/False) on Redis errors.
    """

    def __init__(self) -> None:
        """Initialize Redis backend (connection created via connect())."""
        self.redis_client: Optional[redis.Redis] = None
        self.redis_ttl: int = 1800  # Default 30 minutes

    async def connect(
        self,
        redis_host: str,
        redis_password: str,
        redis_port: int = 6380,
        redis_ssl: bool = True,
        redis_ttl: int = 1800,
    ) -> None:
        """Create async Redis connection.

        Args:
            redis_host: Redis server hostname
            redis_password: Redis password/access key
            redis_port: Redis port (default: 6380 for Azure SSL)
            redis_ssl: Enable SSL/TLS connection (default: True for Azure)
            redis_ttl: TTL for Redis keys in seconds (default: 1800 = 30 minutes)
        """
        self.redis_ttl = redis_ttl

        try:
            self.redis_client = redis.Redis(
                host=redis_host,
                port=redis_port,
                password=redis_password,
                ssl=redis_ssl,
                ssl_cert_reqs="required" if redis_ssl else None,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
                max_connections=10,
            )
            # Test connection
            await self.redis_client.ping()
            logger.info(f"Redis connection successful: {redis_host}:{redis_port}")
        except redis.RedisError as e:
            logger.error(f"Redis connection failed: {e}")
            self.redis_client = None
            raise RuntimeError(f"Failed to connect to Redis: {e}")

    async def close(self) -> None:
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.aclose()
            logger.info("Redis connection closed")

    def is_available(self) -> bool:
        """Check if Redis is available."""
        return self.redis_client is not None

    async def get_chat(self, chat_id: str) -> Optional[Dict[str, Any]]:
        """Cached chat record, or None on miss."""
        if not self.redis_client:
            return None

        try:
            raw = await self.redis_client.get(_chat_key(chat_id))
            if raw:
                await self.redis_client.expire(_chat_key(chat_id), self.redis_ttl)
                logger.info(f"Redis cache hit for chat {chat_id}")
                return json.loads(raw)
        except redis.RedisError as e:
            logger.warning(f"Redis error in get_chat: {e}")

        return None

    async def set_chat(self, chat: Dict[str, Any]) -> bool:
        if not self.redis_client:
            return False

        try:
            await self.redis_client.set(_chat_key(chat["id"]), json.dumps(chat), ex=self.redis_ttl)
            return True
        except redis.RedisError as e:
            logger.warning(f"Redis write error in set_chat: {e}")
            return False

    async def get_chat_list(self, document_id: str, user_id: str) -> Optional[List[Dict[str, Any]]]:
        """Cached chat metadata list for a document, or None on miss."""
        if not self.redis_client:
            return None

        key = _document_key(document_id, user_id)
        try:
            raw = await self.redis_client.get(key)
            if raw is not None:
                await self.redis_client.expire(key, self.redis_ttl)
                chats = json.loads(raw)
                logger.info(f"Redis cache hit for document {document_id}: {len(chats)} chats")
                return chats
        except redis.RedisError as e:
            logger.warning(f"Redis error in get_chat_list: {e}")

        return None

    async def set_chat_list(
        self, document_id: str, user_id: str, chats: List[Dict[str, Any]]
    ) -> bool:
        if not self.redis_client:
            return False

        try:
            await self.redis_client.set(
                _document_key(document_id, user_id), json.dumps(chats), ex=self.redis_ttl
            )
            return True
        except redis.RedisError as e:
            logger.warning(f"Redis write error in set_chat_list: {e}")
            return False

    async def invalidate(
        self, user_id: str, chat_id: Optional[str] = None, document_id: Optional[str] = None
    ) -> bool:
        """Drop a cached chat and/or a document's cached chat list."""
        if not self.redis_client:
            return False

        keys = []
        if chat_id:
            keys.append(_chat_key(chat_id))
        if document_id:
            keys.append(_document_key(document_id, user_id))
        if not keys:
            return True

        try:
            await self.redis_client.delete(*keys)
            return True
        except redis.RedisError as e:
            logger.warning(f"Redis error in invalidate: {e}")
            return False
