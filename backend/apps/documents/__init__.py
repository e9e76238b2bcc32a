"""Documents module - text extraction and listing."""

from apps.documents.routes import router

__all__ = ["router"]
