"""
Minimal MCP-style tool server: exposes the corpus tools (list_files, read_file,
grep) through a standardized tool interface so external agents get the same
sandboxed, read-only view of the documentation as the built-in agent.
"""

import logging
from typing import Any

from fastapi import APIRouter

from docs_rag.agent.tools import AGENT_TOOLS, ToolName, execute_tool
from docs_rag.schemas.tools import GrepArgs, ListFilesArgs, ReadFileArgs
from docs_rag.services.corpus import get_corpus

logger = logging.getLogger(__name__)

mcp_router = APIRouter(tags=["mcp"])


@mcp_router.get(
    "/tools",
    summary="MCP tool discovery",
    description="List tool names, descriptions and JSON input schemas.",
)
def mcp_list_tools() -> dict[str, list[dict[str, Any]]]:
    tools = [
        {
            "name": t["function"]["name"],
            "description": t["function"]["description"],
            "input_schema": t["function"]["parameters"],
        }
        for t in AGENT_TOOLS
    ]
    return {"tools": tools}


# --- list_files ---

@mcp_router.post(
    "/tools/list_files",
    summary="MCP tool: list_files",
    description="List entries of a documentation directory, sorted by name.",
)
def mcp_list_files(body: ListFilesArgs) -> dict[str, Any]:
    logger.info("MCP tool called: list_files")
    return execute_tool(ToolName.LIST_FILES.value, body.model_dump(), corpus=get_corpus())


# --- read_file ---

@mcp_router.post(
    "/tools/read_file",
    summary="MCP tool: read_file",
    description="Read a documentation file by line range (0-based offset, default 200 lines).",
)
def mcp_read_file(body: ReadFileArgs) -> dict[str, Any]:
    logger.info("MCP tool called: read_file")
    return execute_tool(ToolName.READ_FILE.value, body.model_dump(), corpus=get_corpus())


# --- grep ---

@mcp_router.post(
    "/tools/grep",
    summary="MCP tool: grep",
    description="Case-insensitive regex search over documentation files, capped at maxResults matches.",
)
def mcp_grep(body: GrepArgs) -> dict[str, Any]:
    logger.info("MCP tool called: grep")
    return execute_tool(ToolName.GREP.value, body.model_dump(), corpus=get_corpus())
