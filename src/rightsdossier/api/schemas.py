"""Request/response schemas for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field

from rightsdossier.constants import Scope


class APIResponse(BaseModel):
    """Standard response envelope for all API endpoints."""

    success: bool
    data: Any | None = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class AnalysisRequestBody(BaseModel):
    """Request body for POST /api/analysis/legal and /status."""

    right_name: str = Field(min_length=1, max_length=200)
    scope: Scope = Scope.INTERNATIONAL
    sub_scope: str = Field(default="", max_length=200)


class NexusRequestBody(BaseModel):
    """Request body for POST /api/analysis/nexus."""

    from_right: str = Field(min_length=1, max_length=200)
    to_right: str = Field(min_length=1, max_length=200)
    scope: Scope = Scope.INTERNATIONAL
    sub_scope: str = Field(default="", max_length=200)
