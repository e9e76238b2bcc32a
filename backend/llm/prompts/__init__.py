"""LLM prompts for chat answers."""

from llm.prompts.assistant import build_assistant_prompt
from llm.prompts.document_qa import build_document_prompt

__all__ = [
    "build_assistant_prompt",
    "build_document_prompt",
]
