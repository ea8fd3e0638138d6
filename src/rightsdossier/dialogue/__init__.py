"""Dialogue orchestration: the three grounded analysis operations."""

from rightsdossier.dialogue.orchestrator import (
    DialogueOrchestrator,
    DialogueRun,
    fallback_for,
    get_nexus_analysis,
    get_orchestrator,
    get_scope_analysis,
    get_status_analysis,
)

__all__ = [
    "DialogueOrchestrator",
    "DialogueRun",
    "fallback_for",
    "get_nexus_analysis",
    "get_orchestrator",
    "get_scope_analysis",
    "get_status_analysis",
]
