"""Configuration and settings for StudyDesk.

Uses Pydantic Settings for fail-fast validation on startup.
Every pipeline constant (chunk size, history window, document scan limit,
excerpt length) lives here instead of being scattered as literals.
"""

import logging
import sys
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Raises ValidationError on startup if required variables are missing.
    """

    model_config = SettingsConfigDict(
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Keys (required)
    anthropic_api_key: str = Field(..., description="Anthropic API key for Claude")

    # Firebase Configuration (required)
    # Can be either a JSON string, a file path, or base64 of the credentials JSON
    firebase_credentials: str = Field(
        ..., description="Firebase service account JSON string or path to JSON file"
    )
    firebase_storage_bucket: str = Field(
        ..., description="Cloud Storage bucket holding uploaded files"
    )

    # Application Settings
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(
        default=False, description="Debug mode: tracebacks in 500 responses"
    )
    log_level: str = Field(default="INFO", description="Root log level")

    # Ingestion Settings
    chunk_size: int = Field(default=1000, description="Max chunk size in chars")

    # Generation Settings
    llm_model: str = Field(
        default="claude-sonnet-4-20250514", description="Claude model for generation"
    )
    llm_temperature: float = Field(
        default=0.7, description="Moderate sampling temperature for chat answers"
    )
    llm_max_tokens: int = Field(default=2048, description="Max tokens for generation")

    # Context Selection Settings
    chat_history_max_messages: int = Field(
        default=10, description="Max messages to include in chat context"
    )
    document_scan_limit: int = Field(
        default=5, description="Most recently updated documents scanned per question"
    )
    context_excerpt_chars: int = Field(
        default=1000, description="Leading characters of each document put in prompts"
    )
    min_keyword_length: int = Field(
        default=3, description="Question tokens must be longer than this to count"
    )
    source_relevance_score: float = Field(
        default=1.0, description="Score attached to every selected source"
    )

    # Conversation Settings
    conversation_title_length: int = Field(
        default=100, description="Max characters of a conversation title"
    )

    @field_validator("anthropic_api_key")
    @classmethod
    def validate_api_key_not_empty(cls, v: str, info) -> str:
        """Ensure API keys are not empty strings."""
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty")
        return v.strip()

    @field_validator("chunk_size", "document_scan_limit", "context_excerpt_chars")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:
        """Limits must be at least 1."""
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# CORS Configuration - the browser client calls from any origin
CORS_CONFIG: dict[str, Any] = {
    "allow_origins": ["*"],
    "allow_credentials": False,
    "allow_methods": ["GET", "POST", "DELETE", "OPTIONS"],
    "allow_headers": ["authorization", "x-client-info", "apikey", "content-type"],
    "expose_headers": ["X-Request-ID"],
    "max_age": 600,
}

# FastAPI App Configuration
APP_CONFIG: dict[str, Any] = {
    "title": "StudyDesk",
    "description": (
        "Document-aware study assistant. Upload course material and ask "
        "questions answered from your own documents."
    ),
    "version": "0.1.0",
    "docs_url": "/api/docs",
    "redoc_url": "/api/redoc",
    "openapi_url": "/api/openapi.json",
    "openapi_tags": [
        {
            "name": "Health",
            "description": "Health check and service status",
        },
        {
            "name": "Documents",
            "description": "Document text extraction and listing",
        },
        {
            "name": "Chat",
            "description": "Document-aware question answering",
        },
        {
            "name": "Conversations",
            "description": "Conversation listing and history",
        },
    ],
}


def get_app_config() -> dict[str, Any]:
    """Get FastAPI application configuration."""
    return {**APP_CONFIG, "debug": get_settings().debug}


def get_cors_config() -> dict[str, Any]:
    """Get CORS middleware configuration."""
    return CORS_CONFIG.copy()
