"""Prompt for answering from the user's documents."""

DOCUMENT_QA_PROMPT = """You are an intelligent educational assistant. Answer the user's question based on the provided documents and conversation history.

DOCUMENTS:
{document_context}

{history_section}

USER QUESTION: {question}

Please provide a helpful, accurate answer based on the documents provided. If the documents don't contain relevant information, say so and provide general assistance. Always cite which document you're referencing when possible."""


def build_document_prompt(
    question: str, document_context: str, conversation_history: str = ""
) -> str:
    """Prompt embedding document excerpts, optional history and the question."""
    history_section = (
        f"CONVERSATION HISTORY:\n{conversation_history}\n\n"
        if conversation_history
        else ""
    )
    return DOCUMENT_QA_PROMPT.format(
        document_context=document_context,
        history_section=history_section,
        question=question,
    )
