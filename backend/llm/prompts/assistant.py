"""Prompt for answering without document context."""

ASSISTANT_PROMPT = """You are an intelligent educational assistant. {history_section}

USER QUESTION: {question}

Please provide a helpful response. If you need specific document content to answer accurately, let the user know they should upload relevant documents."""


def build_assistant_prompt(question: str, conversation_history: str = "") -> str:
    """History-only prompt that invites uploads when specifics are needed."""
    history_section = (
        f"Here's the conversation history:\n{conversation_history}\n\n"
        if conversation_history
        else ""
    )
    return ASSISTANT_PROMPT.format(history_section=history_section, question=question)
