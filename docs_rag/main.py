# Run from project root: uvicorn docs_rag.main:app --reload

import logging

from fastapi import FastAPI

from docs_rag.api.routes import router
from docs_rag.mcp.server import mcp_router

logging.basicConfig(level=logging.INFO)


app = FastAPI(title="Agentic Docs Retrieval")
app.include_router(router)
app.include_router(mcp_router, prefix="/mcp")
