"""Sources: trust filter, search directives, retrieval and extraction."""

from rightsdossier.sources.extraction import (
    citations_from_matches,
    extract,
    parse_extraction,
)
from rightsdossier.sources.instructions import (
    build_instruction,
    build_nexus_query,
    build_status_query,
)
from rightsdossier.sources.retrieval import (
    candidates_from_grounding,
    retrieve,
)
from rightsdossier.sources.trust import (
    filter_candidates,
    is_acceptable,
)
from rightsdossier.sources.value_objects import (
    AnalysisRequest,
    CandidateSource,
    Citation,
    DialogueResult,
    RetrievalResult,
)

__all__ = [
    "AnalysisRequest",
    "CandidateSource",
    "Citation",
    "DialogueResult",
    "RetrievalResult",
    "build_instruction",
    "build_nexus_query",
    "build_status_query",
    "candidates_from_grounding",
    "citations_from_matches",
    "extract",
    "filter_candidates",
    "is_acceptable",
    "parse_extraction",
    "retrieve",
]
