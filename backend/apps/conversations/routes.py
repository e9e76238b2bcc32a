"""Conversation routes - registers all conversation endpoints."""

from fastapi import APIRouter

from apps.conversations.handlers import (
    delete_conversation,
    get_messages,
    list_conversations,
)
from apps.conversations.handlers.get_messages import MessageListResponse
from apps.conversations.handlers.list_conversations import ConversationListResponse

router = APIRouter(prefix="/conversations", tags=["Conversations"])

# GET /conversations - List conversations
router.get("", response_model=ConversationListResponse)(list_conversations)

# GET /conversations/{conversation_id}/messages - Message history
router.get("/{conversation_id}/messages", response_model=MessageListResponse)(
    get_messages
)

# DELETE /conversations/{conversation_id} - Delete conversation
router.delete("/{conversation_id}")(delete_conversation)
