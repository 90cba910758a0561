"""
Eager mode: the whole documentation corpus in the system prompt, one model call per query.

The document block is loaded once per process; the corpus is static.
"""

import logging
from functools import lru_cache

from docs_rag.agent.llm import complete_text
from docs_rag.agent.prompts import eager_system_prompt
from docs_rag.core.config import AGENT_MAX_TOKENS
from docs_rag.services.corpus import get_corpus
from docs_rag.services.eager_context import load_all_documents

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def eager_prompt() -> str:
    prompt = eager_system_prompt(load_all_documents(get_corpus()))
    logger.info("[eager] system prompt %.1fMB, ~%d tokens", len(prompt) / 1024 / 1024, len(prompt) // 4)
    return prompt


def run_eager(query: str) -> dict:
    """Answer query from the full corpus in one call. Returns answer, steps, tools_used, exhausted."""
    if not isinstance(query, str) or not query.strip():
        raise ValueError("query is required")
    q = query.strip()
    logger.info("[run_eager] START query=%r", q)
    answer = complete_text(q, system=eager_prompt(), max_tokens=AGENT_MAX_TOKENS).strip()
    logger.info("[run_eager] END answer_len=%d", len(answer))
    return {"answer": answer, "steps": 1, "tools_used": [], "exhausted": False}
