"""GET /conversations/{conversation_id}/messages - Full message history."""

import logging

from fastapi import Depends, HTTPException
from pydantic import BaseModel, Field

from db import FirestoreService
from db.models import Message
from dependencies import get_current_user_id, get_firestore_service
from responses import ResponseCode, error_dict

logger = logging.getLogger(__name__)


class MessageListResponse(BaseModel):
    """Messages of a conversation in creation order."""

    conversation_id: str
    messages: list[Message]
    total_count: int = Field(..., description="Number of messages returned")


async def get_messages(
    conversation_id: str,
    user_id: str = Depends(get_current_user_id),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> MessageListResponse:
    """Get every message of a conversation, oldest first."""
    conversation = await firestore.get_conversation(conversation_id, user_id)
    if conversation is None:
        raise HTTPException(
            status_code=404, detail=error_dict(ResponseCode.CONVERSATION_NOT_FOUND)
        )

    messages = await firestore.get_messages(conversation_id)
    logger.debug("Loaded %d messages for %s", len(messages), conversation_id)

    return MessageListResponse(
        conversation_id=conversation_id,
        messages=messages,
        total_count=len(messages),
    )
