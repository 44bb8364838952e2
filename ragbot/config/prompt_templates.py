"""
Ragbot - Prompt Templates
==========================
Centralised prompt management for the RAG engine.  All prompts live
here so they can be versioned and reviewed independently of
application logic.

Exports
-------
SYSTEM_PROMPT_TEMPLATE, RAG_PROMPT_TEMPLATE, CONTEXT_SEPARATOR.
"""

# Documents are joined with a blank line between them.
CONTEXT_SEPARATOR: str = "\n\n"


# ══════════════════════════════════════════════════════════════════════
#  SYSTEM PROMPT
# ══════════════════════════════════════════════════════════════════════
# Placeholders: {no_info_response}, {language_name}, {language_code}

SYSTEM_PROMPT_TEMPLATE: str = """You are a helpful assistant that ONLY answers questions based on the provided context.
If the information cannot be found in the context, respond exactly with: "{no_info_response}"
Do not use any prior knowledge or make assumptions beyond what is explicitly stated in the context.
IMPORTANT: Always respond in {language_name} ({language_code}) regardless of the language of the query or the context."""


# ══════════════════════════════════════════════════════════════════════
#  RAG PROMPT TEMPLATE
# ══════════════════════════════════════════════════════════════════════
# Placeholders: {context}, {question}, {language_name}, {language_code}

RAG_PROMPT_TEMPLATE: str = """══════════════════════════════════════════
CONTEXT
══════════════════════════════════════════
{context}

══════════════════════════════════════════
QUESTION
══════════════════════════════════════════
{question}

──────────────────────────────────────────
Answer based ONLY on the above context in {language_name} ({language_code}):"""
