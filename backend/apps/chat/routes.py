"""Chat routes - registers all chat endpoints."""

from fastapi import APIRouter

from apps.chat.handlers import send_message
from apps.chat.handlers.send_message import ChatResponse

router = APIRouter(prefix="/chat", tags=["Chat"])

# POST /chat - Answer a message
router.post("", response_model=ChatResponse)(send_message)
