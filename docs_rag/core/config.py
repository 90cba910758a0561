"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and app-wide
constants. Keeps the rest of the app decoupled from how config is sourced.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Project root (one level above the docs_rag package)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent

# Documentation corpus (read-only, fixed for the process lifetime)
DOCS_ROOT: Path = Path(
    os.getenv("DOCS_ROOT", "").strip() or str(PROJECT_ROOT / ".next-docs")
).expanduser()

# Only these extensions are searchable/readable documents
DOC_EXTENSIONS: frozenset[str] = frozenset(
    ext.strip().lower()
    for ext in (os.getenv("DOC_EXTENSIONS", "").strip() or ".md,.mdx").split(",")
    if ext.strip()
)

# Tool defaults (externally visible tunables)
READ_PAGE_SIZE: int = int(os.getenv("READ_PAGE_SIZE", "200"))
GREP_MAX_RESULTS: int = int(os.getenv("GREP_MAX_RESULTS", "20"))
MATCH_TEXT_MAX_CHARS: int = int(os.getenv("MATCH_TEXT_MAX_CHARS", "200"))

# Agent loop
MAX_AGENT_STEPS: int = int(os.getenv("MAX_AGENT_STEPS", "15"))
AGENT_MAX_TOKENS: int = int(os.getenv("AGENT_MAX_TOKENS", "4096"))
TOOL_WORKERS: int = int(os.getenv("TOOL_WORKERS", "4"))

# "agentic" (tool-calling loop) or "eager" (whole corpus in the system prompt)
RAG_MODE: str = os.getenv("RAG_MODE", "agentic").strip().lower() or "agentic"

# API timeouts (seconds)
LLM_API_TIMEOUT: float = float(os.getenv("LLM_API_TIMEOUT", "120"))

# OpenAI (agent LLM). OPENAI_BASE_URL points the client at any OpenAI-compatible gateway.
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "").strip()
OPENAI_LLM_MODEL: str = (
    os.getenv("OPENAI_LLM_MODEL", "gpt-4o-mini").strip() or "gpt-4o-mini"
)

# Hugging Face chat (eager-mode fallback when OPENAI_API_KEY is not set)
HF_API_KEY: str = os.getenv("HF_API_KEY", "").strip()
HF_CHAT_URL: str = (
    os.getenv("HF_CHAT_URL", "").strip()
    or "https://router.huggingface.co/v1/chat/completions"
)
HF_LLM_MODEL: str = (
    os.getenv("HF_LLM_MODEL", "meta-llama/Llama-3.2-3B-Instruct").strip()
    or "meta-llama/Llama-3.2-3B-Instruct"
)
