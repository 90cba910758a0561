"""Schemas for the corpus tools: argument models (validated before execution)."""

from pydantic import BaseModel, ConfigDict, Field

from docs_rag.core.config import GREP_MAX_RESULTS, READ_PAGE_SIZE


class ToolArgs(BaseModel):
    """Strict argument model: no type coercion, no unknown fields."""

    model_config = ConfigDict(strict=True, extra="forbid")


class ListFilesArgs(ToolArgs):
    path: str = Field(..., description="Directory path relative to the docs root (use '.' for the root).")


class ReadFileArgs(ToolArgs):
    path: str = Field(..., description="File path relative to the docs root.")
    offset: int = Field(0, ge=0, description="0-based line to start reading from.")
    limit: int = Field(READ_PAGE_SIZE, ge=1, description="Maximum number of lines to return.")


class GrepArgs(ToolArgs):
    pattern: str = Field(..., min_length=1, description="Case-insensitive regular expression.")
    path: str = Field(..., description="File or directory path relative to the docs root.")
    maxResults: int = Field(GREP_MAX_RESULTS, ge=1, description="Maximum number of matching lines to return.")
