"""
Agent LLM: OpenAI-compatible chat completions (primary) or Hugging Face router (eager-mode fallback).

Tool calling requires OPENAI_API_KEY; OPENAI_BASE_URL may point at any
OpenAI-compatible gateway. Missing credentials raise ServiceUnavailableError;
transport and provider errors propagate to the caller.
"""

import json
import logging
from typing import Any

import httpx
from openai import OpenAI

from docs_rag.core.config import (
    HF_API_KEY,
    HF_CHAT_URL,
    HF_LLM_MODEL,
    LLM_API_TIMEOUT,
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
    OPENAI_LLM_MODEL,
)
from docs_rag.core.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)


def _openai_client() -> OpenAI:
    if not OPENAI_API_KEY:
        raise ServiceUnavailableError("Chat model is not configured (set OPENAI_API_KEY).")
    kwargs: dict[str, Any] = {"api_key": OPENAI_API_KEY, "timeout": LLM_API_TIMEOUT}
    if OPENAI_BASE_URL:
        kwargs["base_url"] = OPENAI_BASE_URL
    return OpenAI(**kwargs)


def _decode_arguments(raw: Any) -> Any:
    """Tool call arguments as a dict; undecodable JSON is returned as the raw string."""
    if not isinstance(raw, str):
        return raw if raw is not None else {}
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("[llm] undecodable tool arguments=%r", raw[:200])
        return raw


def chat_with_tools(
    messages: list[dict[str, Any]],
    tools: list[dict[str, Any]],
    max_tokens: int = 4096,
) -> tuple[str | None, list[dict[str, Any]] | None]:
    """
    Call the chat model with tools. Used for agentic (tool-calling) mode.
    Returns (content, tool_calls). If tool_calls is non-empty, caller should execute
    them and call again with tool results; if content is set and no tool_calls, that's the final answer.
    Each tool call is {"id", "name", "arguments"}.
    """
    client = _openai_client()
    logger.info("[llm:chat_with_tools] IN  messages=%d tools=%d", len(messages), len(tools))
    response = client.chat.completions.create(
        model=OPENAI_LLM_MODEL,
        messages=messages,
        tools=tools,
        max_tokens=max_tokens,
    )
    msg = response.choices[0].message if response.choices else None
    if not msg:
        return None, None
    content = (getattr(msg, "content", None) or "").strip() or None
    raw_tool_calls = getattr(msg, "tool_calls", None) or []
    tool_calls = []
    for tc in raw_tool_calls:
        fn = getattr(tc, "function", None)
        if not fn:
            continue
        tool_calls.append({
            "id": getattr(tc, "id", None) or "",
            "name": getattr(fn, "name", None) or "",
            "arguments": _decode_arguments(getattr(fn, "arguments", None)),
        })
    if tool_calls:
        logger.info("[llm:chat_with_tools] OUT tool_calls=%s", [t["name"] for t in tool_calls])
    if content:
        logger.info("[llm:chat_with_tools] OUT content_len=%d", len(content))
    return content, tool_calls if tool_calls else None


def _call_openai(messages: list[dict[str, Any]], max_tokens: int) -> str:
    """Call OpenAI chat completions. Returns generated text."""
    client = _openai_client()
    response = client.chat.completions.create(
        model=OPENAI_LLM_MODEL,
        messages=messages,
        max_tokens=max_tokens,
    )
    msg = response.choices[0].message if response.choices else None
    out = ((msg.content if msg else None) or "").strip()
    logger.info("[llm:openai] OUT response_len=%d", len(out))
    return out


def _call_hf(messages: list[dict[str, Any]], max_tokens: int) -> str:
    """Call Hugging Face router chat completions. Returns generated text."""
    headers = {"Authorization": f"Bearer {HF_API_KEY}", "Content-Type": "application/json"}
    payload = {
        "model": HF_LLM_MODEL,
        "messages": messages,
        "max_tokens": max_tokens,
    }
    with httpx.Client(timeout=LLM_API_TIMEOUT) as client:
        response = client.post(HF_CHAT_URL, json=payload, headers=headers)
    response.raise_for_status()
    data = response.json()
    choices = data.get("choices") or []
    if choices and isinstance(choices[0], dict):
        msg = choices[0].get("message") or {}
        out = (msg.get("content") or "").strip()
        logger.info("[llm:hf] OUT response_len=%d", len(out))
        return out
    return ""


def complete_text(prompt: str, system: str | None = None, max_tokens: int = 4096) -> str:
    """
    Single-shot text generation (no tools). Uses OpenAI when OPENAI_API_KEY is set,
    else Hugging Face. Returns generated text.
    """
    messages: list[dict[str, Any]] = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    logger.info("[llm] IN  prompt_len=%d system_len=%d", len(prompt), len(system or ""))
    if OPENAI_API_KEY:
        return _call_openai(messages, max_tokens)
    if HF_API_KEY:
        return _call_hf(messages, max_tokens)
    raise ServiceUnavailableError("Chat model is not configured (set OPENAI_API_KEY or HF_API_KEY).")
