"""Firestore service for documents, chunks, conversations and messages.

Layout:
- `documents/{document_id}` - one record per uploaded file
- `documents/{document_id}/chunks/...` - chunks created after extraction
- `conversations/{conversation_id}` - chat threads
- `conversations/{conversation_id}/messages/...` - append-only chat turns

Every read that can cross users filters on `user_id`.
"""

import logging
import time
from datetime import UTC, datetime
from typing import Any

from google.cloud.firestore_v1 import AsyncClient, FieldFilter, Query
from google.oauth2 import service_account

from config import get_settings
from db.firebase import get_firebase_app, load_firebase_credentials
from db.models import (
    Conversation,
    Document,
    DocumentChunk,
    Message,
    ProcessingMetadata,
)

logger = logging.getLogger(__name__)

DOCUMENTS = "documents"
CHUNKS = "chunks"
CONVERSATIONS = "conversations"
MESSAGES = "messages"

# Firestore rejects batches larger than this
BATCH_LIMIT = 500


class FirestoreService:
    """Data access for every record the pipeline reads or writes."""

    _initialized: bool = False
    _db: AsyncClient | None = None

    def __init__(self) -> None:
        """Initialize Firestore client (singleton pattern)."""
        if FirestoreService._initialized:
            self.db = FirestoreService._db
            return

        settings = get_settings()

        try:
            creds_dict = load_firebase_credentials(settings.firebase_credentials)
            get_firebase_app()

            gcp_credentials = service_account.Credentials.from_service_account_info(
                creds_dict
            )

            FirestoreService._db = AsyncClient(
                project=creds_dict.get("project_id"),
                credentials=gcp_credentials,
            )
            self.db = FirestoreService._db

            FirestoreService._initialized = True
            logger.info("Firestore client initialized successfully")
        except Exception as e:
            logger.error("Failed to initialize Firestore: %s", e)
            raise

    # --- Document Methods ---

    async def get_document(self, document_id: str, user_id: str) -> Document | None:
        """Get a document if it exists and belongs to the user."""
        try:
            doc = await self.db.collection(DOCUMENTS).document(document_id).get()
            if not doc.exists:
                return None

            data = doc.to_dict()
            if data.get("user_id") != user_id:
                logger.warning(
                    "Document %s requested by non-owner %s", document_id, user_id
                )
                return None

            return _to_document(doc.id, data)

        except Exception as e:
            logger.error("Failed to get document %s: %s", document_id, e)
            raise

    async def list_documents(
        self,
        user_id: str,
        limit: int | None = None,
        processed_only: bool = False,
    ) -> list[Document]:
        """List a user's documents, most recently updated first."""
        try:
            query = self.db.collection(DOCUMENTS).where(
                filter=FieldFilter("user_id", "==", user_id)
            )
            if processed_only:
                query = query.where(
                    filter=FieldFilter("metadata.processed", "==", True)
                )
            query = query.order_by("updated_at", direction=Query.DESCENDING)
            if limit:
                query = query.limit(limit)

            docs = await query.get()
            documents = [_to_document(doc.id, doc.to_dict()) for doc in docs]

            if processed_only:
                documents = [d for d in documents if d.content is not None]
            return documents

        except Exception as e:
            logger.error("Failed to list documents for %s: %s", user_id, e)
            raise

    async def save_document_content(
        self,
        document_id: str,
        content: str,
        metadata: ProcessingMetadata,
    ) -> None:
        """Store extracted text and mark the document processed."""
        try:
            await self.db.collection(DOCUMENTS).document(document_id).update(
                {
                    "content": content,
                    "metadata": metadata.model_dump(),
                    "updated_at": datetime.now(UTC),
                }
            )
            logger.debug("Saved content for document %s", document_id)

        except Exception as e:
            logger.error("Failed to save document %s: %s", document_id, e)
            raise

    async def save_processing_failure(
        self, document_id: str, metadata: ProcessingMetadata
    ) -> None:
        """Record a failed extraction; clears any content from an earlier run."""
        try:
            await self.db.collection(DOCUMENTS).document(document_id).update(
                {
                    "content": None,
                    "metadata": metadata.model_dump(),
                    "updated_at": datetime.now(UTC),
                }
            )

        except Exception as e:
            logger.error("Failed to update metadata of %s: %s", document_id, e)
            raise

    # --- Chunk Methods ---

    async def delete_chunks(self, document_id: str) -> int:
        """Delete every chunk of a document, committing in batches."""
        try:
            docs = await (
                self.db.collection(DOCUMENTS)
                .document(document_id)
                .collection(CHUNKS)
                .get()
            )
            deleted_count = 0

            batch = self.db.batch()
            for doc in docs:
                batch.delete(doc.reference)
                deleted_count += 1

                if deleted_count % BATCH_LIMIT == 0:
                    await batch.commit()
                    batch = self.db.batch()

            if deleted_count % BATCH_LIMIT:
                await batch.commit()

            if deleted_count:
                logger.debug(
                    "Deleted %d chunks of document %s", deleted_count, document_id
                )
            return deleted_count

        except Exception as e:
            logger.error("Failed to delete chunks of %s: %s", document_id, e)
            raise

    async def insert_chunks(self, chunks: list[DocumentChunk]) -> int:
        """Bulk insert chunks, committing in Firestore-sized batches."""
        if not chunks:
            return 0

        try:
            now = datetime.now(UTC)
            batch = self.db.batch()
            pending = 0

            for chunk in chunks:
                ref = (
                    self.db.collection(DOCUMENTS)
                    .document(chunk.document_id)
                    .collection(CHUNKS)
                    .document()
                )
                data = chunk.model_dump(exclude={"id"})
                data["created_at"] = now
                batch.set(ref, data)
                pending += 1

                if pending == BATCH_LIMIT:
                    await batch.commit()
                    batch = self.db.batch()
                    pending = 0

            if pending:
                await batch.commit()

            logger.debug("Inserted %d chunks", len(chunks))
            return len(chunks)

        except Exception as e:
            logger.error("Failed to insert chunks: %s", e)
            raise

    async def get_chunks(self, document_id: str) -> list[DocumentChunk]:
        """Get a document's chunks in ordinal order."""
        try:
            docs = await (
                self.db.collection(DOCUMENTS)
                .document(document_id)
                .collection(CHUNKS)
                .order_by("chunk_index")
                .get()
            )
            return [
                DocumentChunk.model_validate({**doc.to_dict(), "id": doc.id})
                for doc in docs
            ]

        except Exception as e:
            logger.error("Failed to get chunks of %s: %s", document_id, e)
            raise

    # --- Conversation Methods ---

    async def create_conversation(self, user_id: str, title: str) -> Conversation:
        """Create a new conversation for a user."""
        try:
            ref = self.db.collection(CONVERSATIONS).document()
            now = datetime.now(UTC)
            data = {
                "user_id": user_id,
                "title": title,
                "created_at": now,
                "updated_at": now,
            }
            await ref.set(data)
            logger.info("Created conversation %s", ref.id)
            return Conversation(id=ref.id, **data)

        except Exception as e:
            logger.error("Failed to create conversation: %s", e)
            raise

    async def get_conversation(
        self, conversation_id: str, user_id: str
    ) -> Conversation | None:
        """Get a conversation if it exists and belongs to the user."""
        try:
            doc = await self.db.collection(CONVERSATIONS).document(conversation_id).get()
            if not doc.exists:
                return None

            data = doc.to_dict()
            if data.get("user_id") != user_id:
                return None

            return Conversation.model_validate({**data, "id": doc.id})

        except Exception as e:
            logger.error("Failed to get conversation %s: %s", conversation_id, e)
            raise

    async def list_conversations(
        self, user_id: str, limit: int = 50
    ) -> list[Conversation]:
        """List a user's conversations, most recently active first."""
        try:
            docs = await (
                self.db.collection(CONVERSATIONS)
                .where(filter=FieldFilter("user_id", "==", user_id))
                .order_by("updated_at", direction=Query.DESCENDING)
                .limit(limit)
                .get()
            )
            return [
                Conversation.model_validate({**doc.to_dict(), "id": doc.id})
                for doc in docs
            ]

        except Exception as e:
            logger.error("Failed to list conversations for %s: %s", user_id, e)
            raise

    async def touch_conversation(self, conversation_id: str) -> None:
        """Bump a conversation's last activity."""
        try:
            await self.db.collection(CONVERSATIONS).document(conversation_id).set(
                {"updated_at": datetime.now(UTC)}, merge=True
            )

        except Exception as e:
            logger.error("Failed to update conversation %s: %s", conversation_id, e)
            raise

    async def delete_conversation(self, conversation_id: str, user_id: str) -> bool:
        """Delete a conversation and all its messages."""
        try:
            conversation = await self.get_conversation(conversation_id, user_id)
            if conversation is None:
                return False

            conv_ref = self.db.collection(CONVERSATIONS).document(conversation_id)
            docs = await conv_ref.collection(MESSAGES).get()
            deleted_count = 0

            batch = self.db.batch()
            for doc in docs:
                batch.delete(doc.reference)
                deleted_count += 1

                if deleted_count % BATCH_LIMIT == 0:
                    await batch.commit()
                    batch = self.db.batch()

            batch.delete(conv_ref)
            await batch.commit()

            logger.info(
                "Deleted conversation %s (%d messages)", conversation_id, deleted_count
            )
            return True

        except Exception as e:
            logger.error("Failed to delete conversation %s: %s", conversation_id, e)
            raise

    # --- Message Methods ---

    async def add_message(self, message: Message) -> Message:
        """Append a message to its conversation."""
        try:
            ref = (
                self.db.collection(CONVERSATIONS)
                .document(message.conversation_id)
                .collection(MESSAGES)
                .document()
            )
            data = message.model_dump(mode="json", exclude={"id", "created_at"})
            created_at = datetime.now(UTC)
            data["created_at"] = created_at

            await ref.set(data)
            logger.debug("Added %s message to %s", message.role, message.conversation_id)
            return message.model_copy(update={"id": ref.id, "created_at": created_at})

        except Exception as e:
            logger.error("Failed to add message: %s", e)
            raise

    async def get_messages(
        self, conversation_id: str, limit: int | None = None
    ) -> list[Message]:
        """Get messages in creation order; with a limit, only the latest ones."""
        try:
            query = (
                self.db.collection(CONVERSATIONS)
                .document(conversation_id)
                .collection(MESSAGES)
            )
            if limit:
                query = query.order_by(
                    "created_at", direction=Query.DESCENDING
                ).limit(limit)
            else:
                query = query.order_by("created_at")

            docs = await query.get()
            messages = [
                Message.model_validate({**doc.to_dict(), "id": doc.id}) for doc in docs
            ]

            if limit:
                messages.reverse()
            return messages

        except Exception as e:
            logger.error("Failed to get messages: %s", e)
            raise

    async def health_check(self) -> dict[str, Any]:
        """Check Firestore connection health."""
        start = time.time()
        try:
            test_ref = self.db.collection("_health_check").document("test")
            await test_ref.set({"timestamp": datetime.now(UTC)})
            await test_ref.get()

            latency = (time.time() - start) * 1000
            return {"status": "healthy", "latency_ms": round(latency, 2)}
        except Exception as e:
            return {"status": "unhealthy", "error": str(e)}


def _to_document(document_id: str, data: dict[str, Any]) -> Document:
    """Build a Document from stored fields.

    Upload-time keys may live under `metadata` next to processing keys.
    """
    data = dict(data)
    metadata = dict(data.pop("metadata", None) or {})
    upload = {
        key: metadata.pop(key)
        for key in ("original_name", "storage_path")
        if key in metadata
    }
    return Document.model_validate(
        {**data, "id": document_id, "metadata": metadata, "upload": upload}
    )
