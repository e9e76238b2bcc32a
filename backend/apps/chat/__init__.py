"""Chat module - document-aware question answering."""

from apps.chat.routes import router

__all__ = ["router"]
