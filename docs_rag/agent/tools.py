"""
Agent tools: definitions and execution for the tool-calling loop.

Tools: list_files, read_file, grep. All three are read-only and go through the
corpus accessor, which sandboxes every path against the docs root.
execute_tool never raises: failures come back as {"error": message} so the
model can adapt (e.g. try another path).
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from pydantic import ValidationError

from docs_rag.core.errors import CorpusError
from docs_rag.schemas.tools import GrepArgs, ListFilesArgs, ReadFileArgs, ToolArgs
from docs_rag.services.corpus import Corpus, get_corpus

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    LIST_FILES = "list_files"
    READ_FILE = "read_file"
    GREP = "grep"


@dataclass(frozen=True)
class ToolSpec:
    name: ToolName
    description: str
    args_model: type[ToolArgs]
    handler: Callable[[Corpus, Any], dict[str, Any]]


def _list_files(corpus: Corpus, args: ListFilesArgs) -> dict[str, Any]:
    entries = corpus.list_entries(args.path)
    return {"entries": [e.to_dict() for e in entries]}


def _read_file(corpus: Corpus, args: ReadFileArgs) -> dict[str, Any]:
    result = corpus.read_range(args.path, offset=args.offset, limit=args.limit)
    return {"content": result.content, "totalLines": result.total_lines, "showing": result.showing}


def _grep(corpus: Corpus, args: GrepArgs) -> dict[str, Any]:
    result = corpus.search(args.path, args.pattern, max_results=args.maxResults)
    return {
        "matches": [m.to_dict() for m in result.matches],
        "totalFound": len(result.matches),
        "truncated": result.truncated,
    }


TOOL_SPECS: dict[ToolName, ToolSpec] = {
    ToolName.LIST_FILES: ToolSpec(
        name=ToolName.LIST_FILES,
        description="List the files and directories at a path in the documentation tree, sorted by name. Use '.' for the root.",
        args_model=ListFilesArgs,
        handler=_list_files,
    ),
    ToolName.READ_FILE: ToolSpec(
        name=ToolName.READ_FILE,
        description="Read a documentation file by line range. offset is 0-based (default 0); limit defaults to 200 lines. Returns the text, the total line count and which lines are shown.",
        args_model=ReadFileArgs,
        handler=_read_file,
    ),
    ToolName.GREP: ToolSpec(
        name=ToolName.GREP,
        description="Search documentation files for a case-insensitive regular expression. path may be a file or a directory (searched recursively). Returns matching lines with file and 1-based line number; truncated is true when more matches exist than maxResults (default 20).",
        args_model=GrepArgs,
        handler=_grep,
    ),
}


def _strip_titles(schema: Any) -> Any:
    """Drop pydantic's auto-generated 'title' keys from a JSON schema."""
    if isinstance(schema, dict):
        return {k: _strip_titles(v) for k, v in schema.items() if k != "title"}
    if isinstance(schema, list):
        return [_strip_titles(v) for v in schema]
    return schema


# OpenAI function-calling format: list of tool definitions
AGENT_TOOLS: list[dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": spec.name.value,
            "description": spec.description,
            "parameters": _strip_titles(spec.args_model.model_json_schema()),
        },
    }
    for spec in TOOL_SPECS.values()
]


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "arguments"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def execute_tool(name: str, arguments: Any, corpus: Corpus | None = None) -> dict[str, Any]:
    """
    Execute a tool by name with the given arguments. Returns the tool result dict:
    the tool's success payload, or {"error": message}.
    """
    logger.info("[tools] execute_tool name=%r arguments=%r", name, arguments)
    try:
        tool = ToolName(name)
    except ValueError:
        return {"error": f"Unknown tool: {name}"}
    if not isinstance(arguments, dict):
        return {"error": f"Arguments for {tool.value} must be a JSON object"}

    spec = TOOL_SPECS[tool]
    try:
        args = spec.args_model.model_validate(arguments)
    except ValidationError as e:
        return {"error": f"Invalid arguments for {tool.value}: {_format_validation_error(e)}"}

    try:
        result = spec.handler(corpus if corpus is not None else get_corpus(), args)
    except CorpusError as e:
        logger.info("[tools] %s error: %s", tool.value, e.message)
        return {"error": e.message}
    except Exception as e:
        logger.exception("[tools] %s failed", tool.value)
        return {"error": f"{tool.value} failed: {e}"}
    return result


def tool_result_content(result: dict[str, Any]) -> str:
    """Serialize a tool result for the conversation."""
    return json.dumps(result, ensure_ascii=False)
