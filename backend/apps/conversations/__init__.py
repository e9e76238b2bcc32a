"""Conversations module - listing, history and deletion."""

from apps.conversations.routes import router

__all__ = ["router"]
