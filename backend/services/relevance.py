"""Keyword-overlap selection of documents to inject as prompt context.

This is a crude heuristic, not semantic search: a document is relevant when
its text contains any sufficiently long word of the question.
"""

import logging

from config import get_settings
from db.models import Document, SourceCitation
from services.types import RelevanceSelection

logger = logging.getLogger(__name__)


def extract_keywords(question: str, min_length: int = 3) -> list[str]:
    """Lowercased whitespace tokens longer than `min_length` characters."""
    return [word for word in question.lower().split() if len(word) > min_length]


class RelevanceSelector:
    """Chooses which of a user's documents inform an answer."""

    def __init__(
        self,
        scan_limit: int | None = None,
        min_keyword_length: int | None = None,
        relevance_score: float | None = None,
    ) -> None:
        settings = get_settings()
        self.scan_limit = scan_limit or settings.document_scan_limit
        self.min_keyword_length = (
            min_keyword_length
            if min_keyword_length is not None
            else settings.min_keyword_length
        )
        self.relevance_score = (
            relevance_score
            if relevance_score is not None
            else settings.source_relevance_score
        )

    def select(self, question: str, documents: list[Document]) -> RelevanceSelection:
        """Select documents containing at least one question keyword.

        Args:
            question: The user's message.
            documents: The user's documents, most recently updated first.
                Only the first `scan_limit` are considered.

        Returns:
            Selected documents in input order with one citation each.
        """
        keywords = extract_keywords(question, self.min_keyword_length)
        if not keywords:
            return RelevanceSelection()

        selected = [
            doc
            for doc in documents[: self.scan_limit]
            if doc.content is not None and self._matches(doc.content, keywords)
        ]

        logger.info(
            "Relevance: %d of %d documents match %d keywords",
            len(selected),
            min(len(documents), self.scan_limit),
            len(keywords),
        )

        return RelevanceSelection(
            documents=selected,
            sources=[
                SourceCitation(
                    document_id=doc.id,
                    document_title=doc.title,
                    relevance_score=self.relevance_score,
                )
                for doc in selected
            ],
        )

    @staticmethod
    def _matches(content: str, keywords: list[str]) -> bool:
        lowered = content.lower()
        return any(keyword in lowered for keyword in keywords)
