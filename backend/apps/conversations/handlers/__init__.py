"""Conversation handlers."""

from apps.conversations.handlers.delete_conversation import delete_conversation
from apps.conversations.handlers.get_messages import get_messages
from apps.conversations.handlers.list_conversations import list_conversations

__all__ = [
    "list_conversations",
    "get_messages",
    "delete_conversation",
]
