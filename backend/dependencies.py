"""FastAPI dependency injection for services.

Services are cached with @lru_cache() to avoid recreation per request.
Tests swap any of these through `app.dependency_overrides`.
"""

import asyncio
import logging
from functools import lru_cache

from fastapi import Depends, Header, HTTPException
from firebase_admin import auth

from config import Settings, get_settings
from db import BlobStorage, FirestoreService
from db.firebase import get_firebase_app
from llm import BaseLLMService, LLMService
from responses import ResponseCode, error_dict
from services import (
    ChatService,
    Chunker,
    DocumentExtractor,
    IngestionService,
    RelevanceSelector,
)

logger = logging.getLogger(__name__)

# --- Cached Singletons ---
# These are created once and reused across all requests


@lru_cache
def get_firestore_service() -> FirestoreService:
    """Get cached Firestore service."""
    return FirestoreService()


@lru_cache
def get_blob_storage() -> BlobStorage:
    """Get cached blob storage (expensive - has Storage client)."""
    return BlobStorage()


@lru_cache
def get_llm_service() -> BaseLLMService:
    """Get cached LLM service (expensive - has API client)."""
    return LLMService()


@lru_cache
def get_document_extractor() -> DocumentExtractor:
    """Get cached extractor registry."""
    return DocumentExtractor()


# --- Lightweight Services (per-request is fine) ---


def get_chunker() -> Chunker:
    """Get chunker (stateless, cheap to create)."""
    return Chunker()


def get_relevance_selector() -> RelevanceSelector:
    """Get relevance selector (stateless, cheap to create)."""
    return RelevanceSelector()


# --- Identity ---


async def get_current_user_id(
    authorization: str | None = Header(default=None),
) -> str:
    """Resolve the caller's uid from a Firebase ID token bearer header."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=401,
            detail=error_dict(ResponseCode.UNAUTHORIZED, "Missing bearer token"),
        )

    token = authorization.split(" ", 1)[1].strip()
    try:
        claims = await asyncio.to_thread(
            auth.verify_id_token, token, app=get_firebase_app()
        )
    except (ValueError, auth.InvalidIdTokenError, auth.UserDisabledError) as e:
        logger.warning("Rejected ID token: %s", e)
        raise HTTPException(
            status_code=401,
            detail=error_dict(ResponseCode.UNAUTHORIZED, "Invalid or expired token"),
        ) from e

    return claims["uid"]


# --- Composed Services ---
# Use Depends() for proper FastAPI DI chaining


def get_ingestion_service(
    firestore: FirestoreService = Depends(get_firestore_service),
    storage: BlobStorage = Depends(get_blob_storage),
    extractor: DocumentExtractor = Depends(get_document_extractor),
    chunker: Chunker = Depends(get_chunker),
) -> IngestionService:
    """Get ingestion service with injected dependencies."""
    return IngestionService(
        firestore=firestore,
        storage=storage,
        extractor=extractor,
        chunker=chunker,
    )


def get_chat_service(
    firestore: FirestoreService = Depends(get_firestore_service),
    llm: BaseLLMService = Depends(get_llm_service),
    selector: RelevanceSelector = Depends(get_relevance_selector),
    settings: Settings = Depends(get_settings),
) -> ChatService:
    """Get chat service with injected dependencies."""
    return ChatService(
        firestore=firestore,
        llm=llm,
        selector=selector,
        settings=settings,
    )
