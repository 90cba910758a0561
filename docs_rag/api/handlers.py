"""
API handlers: call the agent for a query and map its errors to HTTP.

Responsibility: Bridge HTTP types and the agent. Mode selection and
exception-to-HTTP mapping live here so the agent stays free of FastAPI types.
"""

import asyncio
import logging

from fastapi import HTTPException

from docs_rag.agent.eager import run_eager
from docs_rag.agent.graph import run_agent
from docs_rag.core.config import RAG_MODE
from docs_rag.core.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)


def answer_query(query: str) -> dict:
    """Run the configured mode (agentic tool loop or eager whole-corpus prompt)."""
    if RAG_MODE == "eager":
        return run_eager(query)
    return run_agent(query)


async def handle_query(query: str) -> dict:
    """
    Run the agent off the event loop; map ValueError to 400, an unavailable
    model to 503 and any other failure to 500.
    """
    try:
        return await asyncio.to_thread(answer_query, query)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ServiceUnavailableError as e:
        logger.warning("[api:handle_query] model unavailable: %s", e.message)
        raise HTTPException(status_code=503, detail=e.message) from e
    except Exception as e:
        logger.exception("Agent failed")
        raise HTTPException(status_code=500, detail=str(e)) from e
