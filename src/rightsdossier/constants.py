"""Shared constants — single source of truth for cross-module values.

All magic strings and numbers that appear in 2+ files belong here.
StrEnum members are str-compatible, so downstream code (JSON payloads,
log records, CLI arguments) works unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class Scope(StrEnum):
    """Jurisdictional scope of an analysis request."""

    INTERNATIONAL = "International"
    REGIONAL = "Regional"
    NATIONAL = "National"


class AnalysisKind(StrEnum):
    """Kind of dossier the user asked for."""

    LEGAL = "legal"
    STATUS = "status"
    NEXUS = "nexus"


class SourceCategory(StrEnum):
    """Trust category a candidate source is judged against."""

    LEGAL = "legal"
    NGO = "ngo"
    ACADEMIC = "academic"


class RightCategory(StrEnum):
    """Catalog grouping of human rights."""

    CIVIL = "Civil"
    POLITICAL = "Political"
    ECONOMIC = "Economic"
    SOCIAL = "Social"
    CULTURAL = "Cultural"


class DialogueState(StrEnum):
    """Lifecycle of a single dossier request."""

    IDLE = "idle"
    RETRIEVING = "retrieving"
    EXTRACTING = "extracting"
    DONE = "done"
    FAILED = "failed"


CATEGORY_FOR_KIND: dict[AnalysisKind, SourceCategory] = {
    AnalysisKind.LEGAL: SourceCategory.LEGAL,
    AnalysisKind.STATUS: SourceCategory.NGO,
    AnalysisKind.NEXUS: SourceCategory.ACADEMIC,
}

# ── Circuit Breaker Configuration ────────────────────────

CB_LLM_FAILURE_THRESHOLD = 5
CB_LLM_RECOVERY_TIMEOUT = 30

# ── Retry Strategy ───────────────────────────────────────

RETRY_MAX_ATTEMPTS = 3
RETRY_INITIAL_WAIT = 2
RETRY_MAX_WAIT = 30

# ── LLM Output ───────────────────────────────────────────

LLM_MAX_OUTPUT_TOKENS = 4096

# ── Retrieval ────────────────────────────────────────────

PLACEHOLDER_SOURCE_TITLE = "Source"

# Search-grounding APIs hand back redirect links whose title is the
# publisher's domain.
GROUNDING_REDIRECT_HOSTS = (
    "vertexaisearch.cloud.google.com",
    "grounding-api-redirect",
)

# ── Semantic Search ──────────────────────────────────────

MIN_TERM_LENGTH = 2
DEFAULT_DEBOUNCE_MS = 350

# ── Misc ─────────────────────────────────────────────────

ERROR_TRUNCATION_CHARS = 200
ID_HEX_LENGTH = 12
