"""GET /conversations - List the caller's conversations."""

from datetime import datetime

from fastapi import Depends, Query
from pydantic import BaseModel, Field

from db import FirestoreService
from dependencies import get_current_user_id, get_firestore_service

# --- Response Schemas ---


class ConversationInfo(BaseModel):
    """Information about a conversation."""

    id: str = Field(..., description="Conversation ID")
    title: str = Field(..., description="Conversation title")
    created_at: datetime | None = None
    updated_at: datetime | None = Field(None, description="Last activity")


class ConversationListResponse(BaseModel):
    """Response for listing conversations."""

    conversations: list[ConversationInfo]
    total_count: int


# --- Handler ---


async def list_conversations(
    limit: int = Query(default=50, ge=1, le=200),
    user_id: str = Depends(get_current_user_id),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> ConversationListResponse:
    """List conversations, most recently active first."""
    conversations = await firestore.list_conversations(user_id, limit=limit)

    return ConversationListResponse(
        conversations=[
            ConversationInfo(
                id=c.id,
                title=c.title,
                created_at=c.created_at,
                updated_at=c.updated_at,
            )
            for c in conversations
        ],
        total_count=len(conversations),
    )
