"""
HTTP endpoints for the retrieval agent. Parsing and response shaping only; the work happens in handlers.
"""

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse

from docs_rag.agent.eager import run_eager
from docs_rag.agent.graph import run_agent_stream
from docs_rag.api.handlers import handle_query
from docs_rag.core.config import RAG_MODE
from docs_rag.schemas.query import QueryRequest, QueryResponse

logger = logging.getLogger(__name__)
router = APIRouter()


# --- System ---

@router.get("/", tags=["system"])
def root():
    return {"status": "Docs retrieval agent running", "mode": RAG_MODE}


@router.get("/health", tags=["system"])
def health():
    return {"ok": True}


# --- Query (plain text) ---

@router.post(
    "/api/rag",
    tags=["query"],
    summary="Retrieve relevant documentation for a prompt",
    description="Body: {\"query\": string}. Returns the agent's final text as text/plain. 400 when query is missing or not a string.",
)
async def post_rag(request: Request) -> Response:
    try:
        body = await request.json()
    except ValueError:
        body = None
    query = body.get("query") if isinstance(body, dict) else None
    logger.info("[api:post_rag] IN  query=%r", query if query is not None else "(missing)")
    if not isinstance(query, str) or not query.strip():
        logger.info("[api:post_rag] Rejected: query is required")
        return JSONResponse({"error": "query is required"}, status_code=400)
    result = await handle_query(query)
    return PlainTextResponse(result["answer"])


# --- Query (JSON) ---

@router.post(
    "/query",
    response_model=QueryResponse,
    tags=["query"],
    summary="Query the retrieval agent (sync)",
    description="Send a prompt; receive answer, steps, tools_used, exhausted. 400 on invalid input, 503 when the model is not configured, 500 on agent failure.",
)
async def post_query(body: QueryRequest) -> QueryResponse:
    logger.info("[api:post_query] IN  query=%r", body.query)
    result = await handle_query(body.query)
    logger.info("[api:post_query] OUT tools_used=%s answer_len=%d", result["tools_used"], len(result["answer"]))
    return QueryResponse(**result)


def _agent_events(query: str):
    if RAG_MODE == "eager":
        result = run_eager(query)
        yield {"event": "done", **result}
        return
    yield from run_agent_stream(query)


def _sse_generator(query: str):
    """Yield Server-Sent Events for a streaming agent run."""
    try:
        for evt in _agent_events(query):
            event_type = evt.pop("event", "")
            yield f"event: {event_type}\ndata: {json.dumps(evt)}\n\n"
    except Exception as e:
        logger.exception("SSE stream failed")
        yield f"event: error\ndata: {json.dumps({'message': str(e)})}\n\n"


@router.post(
    "/query/stream",
    tags=["query"],
    summary="Query the retrieval agent (SSE stream)",
    description="Stream progress via Server-Sent Events. Events: tool (one per executed tool call), done, error.",
)
def post_query_stream(body: QueryRequest) -> StreamingResponse:
    logger.info("[api:post_query_stream] IN  query=%r", body.query)
    return StreamingResponse(
        _sse_generator(body.query),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
