"""LLM module - completion backend and prompt templates.

Usage:
    from llm import LLMService, LLMError

    llm = LLMService()
    response = await llm.generate(prompt, temperature=0.7, max_tokens=2048)

Structure:
    - base.py: Abstract interface (BaseLLMService)
    - anthropic.py: Claude implementation (AnthropicService)
    - prompts/: Prompt templates for document and general answers
"""

from llm.anthropic import AnthropicService
from llm.base import BaseLLMService, LLMError
from llm.prompts import build_assistant_prompt, build_document_prompt

# Default provider - can be swapped by changing this alias
LLMService = AnthropicService

__all__ = [
    "BaseLLMService",
    "LLMService",
    "LLMError",
    "AnthropicService",
    "build_assistant_prompt",
    "build_document_prompt",
]
