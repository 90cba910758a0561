"""
LangGraph agent: model turn → tool execution → model turn … → done | exhausted.

The conversation is a per-request value carried through the graph state; nothing
is shared between requests except the read-only corpus. The step budget
(MAX_AGENT_STEPS model turns) is a hard cap; when it is hit the run ends with
whatever text the model last produced.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, TypedDict

from langgraph.graph import END, StateGraph

from docs_rag.agent.llm import chat_with_tools
from docs_rag.agent.prompts import AGENT_SYSTEM_PROMPT
from docs_rag.agent.tools import AGENT_TOOLS, execute_tool, tool_result_content
from docs_rag.core.config import AGENT_MAX_TOKENS, MAX_AGENT_STEPS, TOOL_WORKERS
from docs_rag.services.corpus import Corpus

logger = logging.getLogger(__name__)

# (messages, tools, max_tokens) -> (content, tool_calls)
ChatFn = Callable[..., tuple[str | None, list[dict[str, Any]] | None]]


class ConversationState(TypedDict):
    query: str
    messages: list  # OpenAI chat messages (system, user, assistant, tool)
    step: int
    max_steps: int
    pending_calls: list  # tool calls requested by the last model turn
    answer: str
    tools_used: list
    exhausted: bool


def _validate_query(query: Any) -> str:
    if not isinstance(query, str) or not query.strip():
        raise ValueError("query is required")
    return query.strip()


def _initial_state(query: str, max_steps: int) -> ConversationState:
    return {
        "query": query,
        "messages": [
            {"role": "system", "content": AGENT_SYSTEM_PROMPT},
            {"role": "user", "content": query},
        ],
        "step": 0,
        "max_steps": max_steps,
        "pending_calls": [],
        "answer": "",
        "tools_used": [],
        "exhausted": False,
    }


def _assistant_message(content: str | None, tool_calls: list[dict[str, Any]]) -> dict[str, Any]:
    msg: dict[str, Any] = {"role": "assistant", "content": content or ""}
    if tool_calls:
        msg["tool_calls"] = [
            {
                "id": tc.get("id", ""),
                "type": "function",
                "function": {
                    "name": tc.get("name", ""),
                    "arguments": tc["arguments"] if isinstance(tc.get("arguments"), str) else json.dumps(tc.get("arguments") or {}),
                },
            }
            for tc in tool_calls
        ]
    return msg


def run_tool_calls(tool_calls: list[dict[str, Any]], corpus: Corpus | None = None) -> list[dict[str, Any]]:
    """
    Execute the tool calls of one model turn concurrently.
    Returns tool messages in the same order as tool_calls, each tagged with its call id.
    """
    if not tool_calls:
        return []

    def _one(tc: dict[str, Any]) -> dict[str, Any]:
        return execute_tool(tc.get("name", ""), tc.get("arguments"), corpus=corpus)

    with ThreadPoolExecutor(max_workers=min(TOOL_WORKERS, len(tool_calls))) as pool:
        results = list(pool.map(_one, tool_calls))
    return [
        {"role": "tool", "tool_call_id": tc.get("id", ""), "content": tool_result_content(result)}
        for tc, result in zip(tool_calls, results)
    ]


def _route_after_model(state: ConversationState) -> str:
    """Execute requested tools unless the turn produced none (done) or the budget is spent (exhausted)."""
    if state.get("pending_calls") and not state.get("exhausted"):
        return "execute_tools"
    logger.info(
        "[graph:route_after_model] step=%d max_steps=%d exhausted=%s -> END",
        state.get("step", 0),
        state.get("max_steps", 0),
        state.get("exhausted", False),
    )
    return END


def build_graph(chat: ChatFn, corpus: Corpus | None = None):
    """
    Build and compile the agent graph.
    model_turn → (execute_tools → model_turn)* → END.
    """

    def _model_turn(state: ConversationState) -> dict:
        step = state["step"] + 1
        logger.info("[graph:model_turn] IN  step=%d messages=%d", step, len(state["messages"]))
        content, tool_calls = chat(state["messages"], AGENT_TOOLS, max_tokens=AGENT_MAX_TOKENS)
        tool_calls = tool_calls or []
        exhausted = bool(tool_calls) and step >= state["max_steps"]
        if tool_calls:
            # Narration alongside tool calls only survives as a partial answer on exhaustion
            answer = content if content else state["answer"]
        else:
            answer = content or ""
        logger.info(
            "[graph:model_turn] OUT step=%d content_len=%d tool_calls=%s exhausted=%s",
            step,
            len(content or ""),
            [tc.get("name") for tc in tool_calls],
            exhausted,
        )
        return {
            "messages": state["messages"] + [_assistant_message(content, tool_calls)],
            "step": step,
            "pending_calls": tool_calls,
            "answer": answer,
            "exhausted": exhausted,
        }

    def _execute_tools(state: ConversationState) -> dict:
        calls = state["pending_calls"]
        logger.info("[graph:execute_tools] IN  step=%d calls=%d", state["step"], len(calls))
        tool_messages = run_tool_calls(calls, corpus=corpus)
        return {
            "messages": state["messages"] + tool_messages,
            "pending_calls": [],
            "tools_used": state["tools_used"] + [tc.get("name", "") for tc in calls],
        }

    graph = StateGraph(ConversationState)

    graph.add_node("model_turn", _model_turn)
    graph.add_node("execute_tools", _execute_tools)

    graph.set_entry_point("model_turn")
    graph.add_conditional_edges("model_turn", _route_after_model)
    graph.add_edge("execute_tools", "model_turn")

    return graph.compile()


def _graph_config(max_steps: int) -> dict:
    # Two node runs per step; the step budget ends the run well before this limit.
    return {"recursion_limit": 2 * max_steps + 5}


def _check_max_steps(max_steps: int) -> None:
    if max_steps < 1:
        raise ValueError("max_steps must be at least 1")


def run_agent(
    query: str,
    chat: ChatFn | None = None,
    corpus: Corpus | None = None,
    max_steps: int = MAX_AGENT_STEPS,
) -> dict:
    """
    Run the agent synchronously. Returns answer, steps, tools_used, exhausted.
    Model failures propagate; tool failures are fed back to the model.
    """
    q = _validate_query(query)
    _check_max_steps(max_steps)
    logger.info("[run_agent] START query=%r max_steps=%d", q, max_steps)
    graph = build_graph(chat or chat_with_tools, corpus=corpus)
    final = graph.invoke(_initial_state(q, max_steps), config=_graph_config(max_steps))
    answer = (final.get("answer") or "").strip()
    logger.info(
        "[run_agent] END steps=%d tools_used=%s exhausted=%s answer_len=%d",
        final.get("step", 0),
        final.get("tools_used", []),
        final.get("exhausted", False),
        len(answer),
    )
    return {
        "answer": answer,
        "steps": final.get("step", 0),
        "tools_used": list(final.get("tools_used") or []),
        "exhausted": bool(final.get("exhausted")),
    }


def run_agent_stream(
    query: str,
    chat: ChatFn | None = None,
    corpus: Corpus | None = None,
    max_steps: int = MAX_AGENT_STEPS,
):
    """
    Run the agent and yield SSE-friendly events:
    {"event": "tool", "name": str} for each executed tool call;
    {"event": "done", "answer": str, "tools_used": list, "steps": int, "exhausted": bool};
    or {"event": "error", "message": str}.
    """
    try:
        q = _validate_query(query)
        _check_max_steps(max_steps)
    except ValueError as e:
        yield {"event": "error", "message": str(e)}
        return
    logger.info("[run_agent_stream] START query=%r", q)
    state = dict(_initial_state(q, max_steps))
    graph = build_graph(chat or chat_with_tools, corpus=corpus)
    try:
        for event in graph.stream(state, config=_graph_config(max_steps)):
            # event: dict mapping node name to state update, e.g. {"execute_tools": {"tools_used": [...]}}
            for node_name, update in event.items():
                if node_name == "execute_tools":
                    for name in update.get("tools_used", [])[len(state["tools_used"]):]:
                        yield {"event": "tool", "name": name}
                state.update(update or {})
    except Exception as e:
        logger.exception("[run_agent_stream] Agent stream failed")
        yield {"event": "error", "message": str(e)}
        return
    yield {
        "event": "done",
        "answer": (state.get("answer") or "").strip(),
        "tools_used": list(state.get("tools_used") or []),
        "steps": state.get("step", 0),
        "exhausted": bool(state.get("exhausted")),
    }
    logger.info("[run_agent_stream] END")
