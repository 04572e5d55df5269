"""HTTP client for the chat record and title endpoints."""

import logging
from typing import Any, Optional, Sequence

import httpx

from ..schemas.chat import ChatMetadata, ChatRecord
from ..schemas.common import ChatMessage

logger = logging.getLogger(__name__)


class ChatServiceError(Exception):
    """A chat API call failed."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


def error_message(response: httpx.Response) -> str:
    """Extract ``{"error": ...}`` from a failed response, else its body text."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return response.text or f"Request failed with {response.status_code}"


class ChatApiClient:
    """Chat records and title generation over the InkSink API.

    The caller owns ``http`` (base URL, auth headers, transport).
    """

    def __init__(self, http: httpx.AsyncClient, prefix: str = "/api"):
        self._http = http
        self._prefix = prefix.rstrip("/")

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = await self._http.request(method, f"{self._prefix}{path}", **kwargs)
        except httpx.HTTPError as e:
            raise ChatServiceError(f"Unexpected error calling {path}: {e}") from e

        if resp.is_error:
            raise ChatServiceError(error_message(resp), code=str(resp.status_code))
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    async def list_chats(self, document_id: str) -> list[ChatMetadata]:
        """Chat metadata for a document, most recent first."""
        data = await self._request("GET", f"/documents/{document_id}/chats")
        return [ChatMetadata.model_validate(item) for item in data or []]

    async def get_most_recent_chat(self, document_id: str) -> Optional[ChatRecord]:
        data = await self._request("GET", f"/documents/{document_id}/chats/latest")
        return ChatRecord.model_validate(data) if data else None

    async def get_chat(self, chat_id: str) -> Optional[ChatRecord]:
        try:
            data = await self._request("GET", f"/chats/{chat_id}")
        except ChatServiceError as e:
            if e.code == "404":
                return None
            raise
        return ChatRecord.model_validate(data) if data else None

    async def create_chat(
        self, document_id: str, messages: Sequence[ChatMessage], title: str = "New Chat"
    ) -> ChatRecord:
        data = await self._request(
            "POST",
            "/chats",
            json={
                "document_id": document_id,
                "title": title,
                "messages": [m.to_record() for m in messages],
            },
        )
        return ChatRecord.model_validate(data)

    async def update_chat(
        self,
        chat_id: str,
        messages: Optional[Sequence[ChatMessage]] = None,
        title: Optional[str] = None,
    ) -> ChatRecord:
        body: dict[str, Any] = {}
        if messages is not None:
            body["messages"] = [m.to_record() for m in messages]
        if title is not None:
            body["title"] = title
        data = await self._request("PATCH", f"/chats/{chat_id}", json=body)
        return ChatRecord.model_validate(data)

    async def delete_chat(self, chat_id: str) -> None:
        await self._request("DELETE", f"/chats/{chat_id}")

    async def generate_title(self, message: str) -> str:
        data = await self._request("POST", "/chat-title", json={"message": message})
        title = (data or {}).get("title")
        if not isinstance(title, str) or not title:
            raise ChatServiceError("Failed to generate title")
        return title
