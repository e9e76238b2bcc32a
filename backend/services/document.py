"""Text extraction for uploaded documents.

Handles:
- Plain text (UTF-8 decode)
- PDF (PyMuPDF, page by page)
- DOCX (python-docx raw text)
- PPTX and images (guidance placeholders, never parsed)

Extraction never raises: parser failures, empty documents and unsupported
types degrade to a descriptive placeholder string so ingestion always has
some text to store. Blocking parsers run through asyncio.to_thread.
"""

import asyncio
import io
import logging
from collections.abc import Callable

import fitz  # PyMuPDF
from docx import Document as DocxDocument

from services.types import ExtractionResult

logger = logging.getLogger(__name__)

TEXT_PLAIN = "text/plain"
PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
IMAGE_PREFIX = "image/"

PDF_EMPTY_MESSAGE = "No text content could be extracted from this PDF."
DOCX_EMPTY_MESSAGE = "No text content could be extracted from this DOCX file."

PPTX_GUIDANCE = (
    "PowerPoint file: PPTX ({size_kb}KB)\n\n"
    "PPTX files contain rich formatting and multimedia content that requires "
    "specialized processing.\n\n"
    "For text extraction from PowerPoint files, please:\n"
    "1. Save/export the presentation as PDF from PowerPoint\n"
    "2. Copy and paste text content into a text file\n"
    '3. Use PowerPoint\'s "Save as Text" option if available\n\n'
    "Alternatively, upload individual slides as images for OCR processing."
)

IMAGE_GUIDANCE = (
    "Image file: {file_name} ({size_kb}KB)\n\n"
    "This is an image file. For text extraction from images, consider:\n"
    "1. Using OCR tools like Google Vision API\n"
    "2. Converting the image to PDF with embedded text\n"
    "3. Manually transcribing important text content\n\n"
    "If this image contains charts, diagrams, or handwritten text, please "
    "provide a text description of the content."
)

Extractor = Callable[[bytes, str], ExtractionResult]


def size_in_kb(data: bytes) -> int:
    """Size rounded to whole kilobytes."""
    return round(len(data) / 1024)


def extract_plain_text(data: bytes, file_name: str) -> ExtractionResult:
    """Decode bytes as UTF-8 text verbatim."""
    return ExtractionResult(text=data.decode("utf-8", errors="replace"))


def extract_pdf_text(data: bytes, file_name: str) -> ExtractionResult:
    """Extract PDF text page by page.

    Each page's text items are joined by single spaces and pages are
    separated by a blank line.
    """
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            page_texts = []
            for page in doc:
                items = [w[4] for w in page.get_text("words") if w[4].strip()]
                page_texts.append(" ".join(items))

        text = "\n\n".join(page_texts).strip()
        if not text:
            return ExtractionResult(
                text=PDF_EMPTY_MESSAGE, degraded=True, reason="empty"
            )
        return ExtractionResult(text=text)

    except Exception as e:
        logger.error("PDF extraction error for %s: %s", file_name, e)
        return ExtractionResult(
            text=f"PDF text extraction failed: {e}", degraded=True, reason=str(e)
        )


def extract_docx_text(data: bytes, file_name: str) -> ExtractionResult:
    """Extract raw text from paragraphs and table cells of a Word document."""
    try:
        doc = DocxDocument(io.BytesIO(data))
        parts = [p.text for p in doc.paragraphs]

        for table in doc.tables:
            for row in table.rows:
                parts.extend(cell.text for cell in row.cells)

        text = "\n\n".join(part for part in parts if part.strip()).strip()
        if not text:
            return ExtractionResult(
                text=DOCX_EMPTY_MESSAGE, degraded=True, reason="empty"
            )
        return ExtractionResult(text=text)

    except Exception as e:
        logger.error("DOCX extraction error for %s: %s", file_name, e)
        return ExtractionResult(
            text=f"DOCX text extraction failed: {e}", degraded=True, reason=str(e)
        )


def pptx_guidance(data: bytes, file_name: str) -> ExtractionResult:
    """Presentations are not parsed; explain how to get their text in."""
    return ExtractionResult(
        text=PPTX_GUIDANCE.format(size_kb=size_in_kb(data)),
        degraded=True,
        reason="pptx extraction not implemented",
    )


def image_guidance(data: bytes, file_name: str) -> ExtractionResult:
    """Images are not OCR'd; suggest external tools."""
    return ExtractionResult(
        text=IMAGE_GUIDANCE.format(file_name=file_name, size_kb=size_in_kb(data)),
        degraded=True,
        reason="ocr not implemented",
    )


class DocumentExtractor:
    """Dispatches bytes to the extractor registered for their MIME type.

    Exact MIME types win over the `image/` prefix.
    """

    def __init__(self) -> None:
        self._by_type: dict[str, Extractor] = {
            TEXT_PLAIN: extract_plain_text,
            PDF: extract_pdf_text,
            DOCX: extract_docx_text,
            PPTX: pptx_guidance,
        }
        self._by_prefix: dict[str, Extractor] = {IMAGE_PREFIX: image_guidance}

    def resolve(self, file_type: str) -> Extractor | None:
        """Find the extractor for a MIME type."""
        if file_type in self._by_type:
            return self._by_type[file_type]
        for prefix, extractor in self._by_prefix.items():
            if file_type.startswith(prefix):
                return extractor
        return None

    def extract_sync(
        self, data: bytes, file_type: str, file_name: str = ""
    ) -> ExtractionResult:
        """Extract text without touching the event loop."""
        extractor = self.resolve(file_type)
        if extractor is None:
            return ExtractionResult(
                text=f"Unsupported file type: {file_type}",
                degraded=True,
                reason="unsupported",
            )

        try:
            return extractor(data, file_name)
        except Exception as e:
            # extract never raises
            logger.exception("Extractor for %s raised", file_type)
            return ExtractionResult(
                text=f"Text extraction failed: {e}", degraded=True, reason=str(e)
            )

    async def extract(
        self, data: bytes, file_type: str, file_name: str = ""
    ) -> ExtractionResult:
        """Extract text from raw bytes of the declared MIME type."""
        result = await asyncio.to_thread(self.extract_sync, data, file_type, file_name)

        if result.degraded:
            logger.warning(
                "Degraded extraction for %s (%s): %s",
                file_name,
                file_type,
                result.reason,
            )
        else:
            logger.info("Extracted %d chars from %s", len(result.text), file_name)

        return result


