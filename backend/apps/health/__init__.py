"""Health module."""

from apps.health.routes import router

__all__ = ["router"]
