"""Schemas for the query endpoints."""

from pydantic import BaseModel, Field


class QueryRequest(BaseModel):
    """Request body for POST /query and POST /query/stream. Each request runs its own conversation."""

    query: str = Field(..., min_length=1, description="Prompt to retrieve documentation for.")


class QueryResponse(BaseModel):
    """Response for POST /query."""

    answer: str = Field(..., description="Final text from the agent (may be empty when nothing is relevant).")
    steps: int = Field(0, description="Number of model turns used.")
    tools_used: list[str] = Field(default_factory=list, description="Tools called, in call order (e.g. grep, read_file).")
    exhausted: bool = Field(False, description="True when the step budget ended the run before a final answer.")
