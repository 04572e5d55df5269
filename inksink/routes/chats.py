"""Chat record CRUD API routes."""

from typing import List, Optional

from fastapi import APIRouter, Response

from ..core.errors import ApiError
from ..dependencies import AuthenticatedUserDep, ChatStoreDep
from ..schemas import ChatCreate, ChatMetadata, ChatRecord, ChatUpdate

router = APIRouter()

CHAT_NOT_FOUND = "Chat not found"


@router.get("/documents/{document_id}/chats", response_model=List[ChatMetadata])
async def list_chats(
    document_id: str,
    store: ChatStoreDep,
    current_user: AuthenticatedUserDep,
) -> List[ChatMetadata]:
    """List chat metadata for a document, most recently updated first."""
    chats = await store.list_chats(document_id, current_user.user_id)
    return [ChatMetadata.model_validate(chat) for chat in chats]


@router.get("/documents/{document_id}/chats/latest", response_model=Optional[ChatRecord])
async def get_latest_chat(
    document_id: str,
    store: ChatStoreDep,
    current_user: AuthenticatedUserDep,
) -> Optional[ChatRecord]:
    """Most recent chat of a document with its transcript; null when none exists."""
    chat = await store.load_most_recent_chat(document_id, current_user.user_id)
    return ChatRecord.model_validate(chat) if chat else None


@router.post("/chats", response_model=ChatRecord, status_code=201)
async def create_chat(
    body: ChatCreate,
    store: ChatStoreDep,
    current_user: AuthenticatedUserDep,
) -> ChatRecord:
    chat = await store.create_chat(
        document_id=body.document_id,
        user_id=current_user.user_id,
        title=body.title,
        messages=[m.to_record() for m in body.messages],
    )
    return ChatRecord.model_validate(chat)


@router.get("/chats/{chat_id}", response_model=ChatRecord)
async def get_chat(
    chat_id: str,
    store: ChatStoreDep,
    current_user: AuthenticatedUserDep,
) -> ChatRecord:
    """Get a chat with all messages.

    Raises:
        ApiError: 404 if the chat does not exist
    """
    chat = await store.get_chat(chat_id, current_user.user_id)
    if not chat:
        raise ApiError(404, CHAT_NOT_FOUND)
    return ChatRecord.model_validate(chat)


@router.patch("/chats/{chat_id}", response_model=ChatRecord)
async def update_chat(
    chat_id: str,
    body: ChatUpdate,
    store: ChatStoreDep,
    current_user: AuthenticatedUserDep,
) -> ChatRecord:
    """Update a chat's title and/or replace its transcript."""
    chat = await store.update_chat(
        chat_id,
        current_user.user_id,
        title=body.title,
        messages=[m.to_record() for m in body.messages] if body.messages is not None else None,
    )
    if not chat:
        raise ApiError(404, CHAT_NOT_FOUND)
    return ChatRecord.model_validate(chat)


@router.delete("/chats/{chat_id}", status_code=204)
async def delete_chat(
    chat_id: str,
    store: ChatStoreDep,
    current_user: AuthenticatedUserDep,
) -> Response:
    deleted = await store.delete_chat(chat_id, current_user.user_id)
    if not deleted:
        raise ApiError(404, CHAT_NOT_FOUND)
    return Response(status_code=204)
