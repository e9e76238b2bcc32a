"""Chat orchestration: history + document context + question -> answer.

Flow of one turn:
1. Resolve (or lazily create) the conversation
2. Load recent history
3. Persist the user message
4. Select relevant documents
5. Build the prompt and call the completion backend
6. Persist the assistant message with its sources
"""

import logging

from config import Settings
from db import FirestoreService
from db.models import (
    AssistantMessageMetadata,
    Conversation,
    Message,
    UserMessageMetadata,
)
from llm import BaseLLMService, build_assistant_prompt, build_document_prompt
from services.relevance import RelevanceSelector
from services.types import ChatResult, ChatTurn

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Chat"


class ConversationNotFoundError(Exception):
    """Raised when a conversation does not exist for the requesting user."""


def format_history(messages: list[Message]) -> str:
    """Render messages as 'User: ...' / 'Assistant: ...' blocks."""
    return "\n\n".join(
        f"{'User' if msg.role == 'user' else 'Assistant'}: {msg.content}"
        for msg in messages
    )


class ChatService:
    """Answers user messages from their documents and conversation."""

    def __init__(
        self,
        firestore: FirestoreService,
        llm: BaseLLMService,
        selector: RelevanceSelector,
        settings: Settings,
    ) -> None:
        self.firestore = firestore
        self.llm = llm
        self.selector = selector
        self.settings = settings

    async def send_message(
        self,
        user_id: str,
        turn: ChatTurn,
        request_id: str | None = None,
    ) -> ChatResult:
        """Answer one user message and persist both turns.

        Raises:
            ConversationNotFoundError: If the given conversation is not the user's.
            LLMError: If the completion backend fails.
        """
        conversation = await self._resolve_conversation(user_id, turn)
        logger.info(
            "[%s] Processing chat request for conversation: %s",
            request_id,
            conversation.id,
        )

        history = await self.firestore.get_messages(
            conversation.id, limit=self.settings.chat_history_max_messages
        )
        conversation_history = format_history(history)

        await self.firestore.add_message(
            Message(
                conversation_id=conversation.id,
                role="user",
                content=turn.message,
                metadata=UserMessageMetadata(files=turn.files),
            )
        )

        documents = await self.firestore.list_documents(
            user_id,
            limit=self.settings.document_scan_limit,
            processed_only=True,
        )
        selection = self.selector.select(turn.message, documents)

        if selection.has_context:
            prompt = build_document_prompt(
                turn.message,
                selection.build_context(self.settings.context_excerpt_chars),
                conversation_history,
            )
        else:
            prompt = build_assistant_prompt(turn.message, conversation_history)

        logger.info(
            "[%s] Calling LLM (%d sources, %d history messages)",
            request_id,
            len(selection.sources),
            len(history),
        )
        response = await self.llm.generate(
            prompt,
            temperature=self.settings.llm_temperature,
            max_tokens=self.settings.llm_max_tokens,
        )
        logger.info("[%s] AI response generated successfully", request_id)

        await self.firestore.add_message(
            Message(
                conversation_id=conversation.id,
                role="assistant",
                content=response,
                metadata=AssistantMessageMetadata(
                    sources=selection.sources,
                    has_document_context=selection.has_context,
                ),
            )
        )
        await self.firestore.touch_conversation(conversation.id)

        return ChatResult(
            response=response,
            conversation_id=conversation.id,
            sources=selection.sources,
            has_document_context=selection.has_context,
        )

    async def _resolve_conversation(self, user_id: str, turn: ChatTurn) -> Conversation:
        if turn.conversation_id:
            conversation = await self.firestore.get_conversation(
                turn.conversation_id, user_id
            )
            if conversation is None:
                raise ConversationNotFoundError(
                    f"Conversation {turn.conversation_id} not found"
                )
            return conversation

        title = turn.message.strip()[: self.settings.conversation_title_length]
        return await self.firestore.create_conversation(
            user_id, title or DEFAULT_TITLE
        )
