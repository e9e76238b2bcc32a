"""Document routes - registers all document endpoints."""

from fastapi import APIRouter

from apps.documents.handlers import get_document, list_documents, process_document
from apps.documents.handlers.get_document import DocumentDetailResponse
from apps.documents.handlers.list_documents import DocumentListResponse

router = APIRouter(prefix="/documents", tags=["Documents"])

# POST /documents/process - Extract text of an uploaded document
router.post("/process")(process_document)

# GET /documents - List documents
router.get("", response_model=DocumentListResponse)(list_documents)

# GET /documents/{document_id} - Get one document
router.get("/{document_id}", response_model=DocumentDetailResponse)(get_document)
