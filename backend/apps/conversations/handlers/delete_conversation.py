"""DELETE /conversations/{conversation_id} - Delete a conversation."""

import logging

from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from db import FirestoreService
from dependencies import get_current_user_id, get_firestore_service
from responses import ResponseCode, error_response, get_http_status, get_message

logger = logging.getLogger(__name__)


async def delete_conversation(
    conversation_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> JSONResponse:
    """Delete a conversation and all its messages."""
    request_id = getattr(request.state, "request_id", None)
    logger.info("[%s] Delete request for conversation: %s", request_id, conversation_id)

    deleted = await firestore.delete_conversation(conversation_id, user_id)
    if not deleted:
        return error_response(
            ResponseCode.CONVERSATION_NOT_FOUND, request_id=request_id
        )

    return JSONResponse(
        content={
            "success": True,
            "message": get_message(ResponseCode.CONVERSATION_DELETED),
            "conversation_id": conversation_id,
        },
        status_code=get_http_status(ResponseCode.CONVERSATION_DELETED),
    )
