"""Rights search: instant table, session cache and semantic matching."""

from rightsdossier.search.semantic import (
    INSTANT_MAP,
    SemanticCache,
    SemanticConceptMatcher,
    fetch_semantic_ids,
    get_semantic_rights,
    get_session_cache,
    instant_matches,
    normalize_term,
)

__all__ = [
    "INSTANT_MAP",
    "SemanticCache",
    "SemanticConceptMatcher",
    "fetch_semantic_ids",
    "get_semantic_rights",
    "get_session_cache",
    "instant_matches",
    "normalize_term",
]
