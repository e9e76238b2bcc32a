"""Tests for keyword relevance selection."""

from db.models import Document
from services.relevance import RelevanceSelector, extract_keywords
from services.types import RelevanceSelection


def make_document(doc_id: str, content: str | None, title: str | None = None):
    return Document(
        id=doc_id,
        user_id="user-1",
        title=title or f"{doc_id}.txt",
        file_type="text/plain",
        content=content,
    )


class TestExtractKeywords:
    """Tests for question tokenization."""

    def test_keeps_tokens_longer_than_three(self):
        assert extract_keywords("what is photosynthesis") == ["what", "photosynthesis"]

    def test_lowercases(self):
        assert extract_keywords("Explain MITOSIS") == ["explain", "mitosis"]

    def test_short_question_has_no_keywords(self):
        assert extract_keywords("is it ok?") == []


class TestRelevanceSelector:
    """Tests for RelevanceSelector."""

    def setup_method(self):
        self.selector = RelevanceSelector(scan_limit=5)

    def test_selects_document_containing_keyword(self):
        doc = make_document("bio", "Notes on Photosynthesis and respiration.")
        selection = self.selector.select("what is photosynthesis", [doc])

        assert selection.documents == [doc]
        assert selection.sources[0].document_id == "bio"
        assert selection.sources[0].document_title == "bio.txt"
        assert selection.sources[0].relevance_score == 1.0

    def test_ignores_document_without_keywords(self):
        doc = make_document("history", "The French Revolution began in 1789.")
        selection = self.selector.select("what is photosynthesis", [doc])

        assert not selection.has_context
        assert selection.sources == []

    def test_substring_match(self):
        doc = make_document("bio", "photosynthetic organisms")
        selection = self.selector.select("tell me about photosynthetic", [doc])
        assert selection.has_context

    def test_short_tokens_never_match(self):
        doc = make_document("any", "the cat is on the mat")
        selection = self.selector.select("the cat", [doc])
        assert not selection.has_context

    def test_only_first_documents_scanned(self):
        documents = [make_document(f"d{i}", "unrelated text") for i in range(5)]
        documents.append(make_document("d5", "photosynthesis"))

        selection = self.selector.select("photosynthesis", documents)
        assert not selection.has_context

    def test_unprocessed_documents_skipped(self):
        selection = self.selector.select(
            "photosynthesis", [make_document("pending", None)]
        )
        assert not selection.has_context

    def test_keeps_input_order(self):
        documents = [
            make_document("new", "cells and photosynthesis"),
            make_document("old", "photosynthesis again"),
        ]
        selection = self.selector.select("photosynthesis", documents)
        assert [d.id for d in selection.documents] == ["new", "old"]

    def test_build_context_truncates(self):
        doc = make_document("long", "x" * 3000, title="Long Notes")
        context = RelevanceSelection(documents=[doc]).build_context(1000)

        assert context == f"Document: Long Notes\nContent: {'x' * 1000}..."

    def test_build_context_separates_documents(self):
        documents = [make_document("a", "alpha"), make_document("b", "beta")]
        context = RelevanceSelection(documents=documents).build_context(1000)

        assert context.split("\n\n---\n\n") == [
            "Document: a.txt\nContent: alpha...",
            "Document: b.txt\nContent: beta...",
        ]
