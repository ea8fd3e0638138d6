"""FastAPI dependency injection for app.state services."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:
    from rightsdossier.dialogue.orchestrator import DialogueOrchestrator
    from rightsdossier.search.semantic import SemanticConceptMatcher


def get_orchestrator(request: Request) -> DialogueOrchestrator:
    """Get the DialogueOrchestrator from app.state."""
    return request.app.state.orchestrator  # type: ignore[no-any-return]


def get_matcher(request: Request) -> SemanticConceptMatcher:
    """Get the SemanticConceptMatcher from app.state."""
    return request.app.state.matcher  # type: ignore[no-any-return]
