"""POST /chat - Answer a message from the caller's documents."""

import logging

from fastapi import Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from db.models import AttachedFile, SourceCitation
from dependencies import get_chat_service, get_current_user_id
from llm import LLMError
from responses import ResponseCode, error_response
from services import ChatService, ChatTurn, ConversationNotFoundError

logger = logging.getLogger(__name__)


# --- Request/Response Schemas (API-specific) ---


class ChatRequest(BaseModel):
    """Request body for chat endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(
        ...,
        min_length=1,
        max_length=8000,
        description="User's message or question",
    )
    conversation_id: str | None = Field(
        None,
        alias="conversationId",
        description="Existing conversation; a new one is created when omitted",
    )
    files: list[AttachedFile] = Field(
        default_factory=list, description="Files attached to this message"
    )


class ChatMetadata(BaseModel):
    """Context that informed the answer."""

    sources: list[SourceCitation]
    has_document_context: bool
    conversation_id: str


class ChatResponse(BaseModel):
    """Response body for chat endpoint."""

    response: str
    metadata: ChatMetadata


# --- Error mapping ---

CHAT_ERROR_MAP = {
    ConversationNotFoundError: ResponseCode.CONVERSATION_NOT_FOUND,
    LLMError: ResponseCode.LLM_ERROR,
}


# --- Handler ---


async def send_message(
    body: ChatRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse | JSONResponse:
    """Send a message and get the assistant's answer.

    A conversation is created when none is given. Both turns are stored.
    """
    request_id = getattr(request.state, "request_id", None)
    logger.info("[%s] Chat request: %s", request_id, body.message[:100])

    try:
        result = await chat_service.send_message(
            user_id,
            ChatTurn(
                message=body.message,
                conversation_id=body.conversation_id,
                files=body.files,
            ),
            request_id,
        )

    except tuple(CHAT_ERROR_MAP.keys()) as e:
        code = CHAT_ERROR_MAP[type(e)]
        log_fn = logger.warning if code.value.startswith("1") else logger.error
        log_fn("[%s] %s: %s", request_id, type(e).__name__, e)
        return error_response(code, str(e), request_id)

    return ChatResponse(
        response=result.response,
        metadata=ChatMetadata(
            sources=result.sources,
            has_document_context=result.has_document_context,
            conversation_id=result.conversation_id,
        ),
    )
