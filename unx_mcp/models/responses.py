"""Response payloads for tools and HTTP endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class ToolResult(BaseModel):
    """Text produced by a tool handler."""

    text: str = Field(default="", description="Text returned to the agent")


class HealthResponse(BaseModel):
    """Liveness payload."""

    status: str
    version: str
    timestamp: datetime


class ReadyResponse(BaseModel):
    """Readiness payload."""

    status: str
    version: str
    checks: dict[str, bool] = Field(default_factory=dict)
