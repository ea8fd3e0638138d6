"""Consolidated LLM prompts.

Retrieval directives themselves are composed in
``rightsdossier.sources.instructions``; this module holds the system
prompts and the builders that wrap stage inputs for the model.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TYPE_CHECKING

from rightsdossier.constants import SourceCategory

if TYPE_CHECKING:
    from rightsdossier.catalog import HumanRight
    from rightsdossier.sources.value_objects import CandidateSource

# ── Grounded retrieval ────────────────────────────────────────────

RETRIEVAL_SYSTEM_PROMPT = """\
You are a human rights research assistant with web search. Search for the \
requested material and answer from what you find. Name every document you \
rely on precisely, quote provisions and reports verbatim, and say so plainly \
when you could not find something. Do not invent documents, article numbers \
or quotations."""

# ── Structured extraction ─────────────────────────────────────────

EXTRACTION_SYSTEM_PROMPT = """\
You turn research notes into citation records. You may ONLY cite sources from \
the numbered candidate list you are given, and you refer to them ONLY by their \
index.

## Output
Return a JSON object: {"sourceMatches": [{"urlIndex": <int>, "title": <str>, \
"reference": <str>, "year": <str, optional>}]}

## Rules
- urlIndex MUST be the zero-based index of a listed candidate.
- NEVER write, fabricate or alter a URL. URLs are attached from the list.
- If several candidates cover the same underlying instrument or report, pick \
the primary or official one (treaty body, court, publishing organisation) and \
skip the duplicates.
- Skip candidates the notes do not support. Return {"sourceMatches": []} if \
none fit.
"""

_CATEGORY_GUIDANCE: dict[SourceCategory, str] = {
    SourceCategory.LEGAL: (
        "title: full official name of the instrument WITH YEAR in "
        "parentheses, e.g. 'International Covenant on Civil and Political "
        "Rights (1966)'.\n"
        "reference: 'Article N: ' followed by the EXACT quoted text of the "
        "provision, not a summary.\n"
        "Return 3-5 sources."
    ),
    SourceCategory.NGO: (
        "title: exact report title as published.\n"
        "reference: a DIRECT QUOTE in quotation marks followed by "
        "' - Organization Name, Month Year'. No summaries.\n"
        "year: publication year if known.\n"
        "Return 3-4 sources."
    ),
    SourceCategory.ACADEMIC: (
        "title: the paper's title, or a descriptive title of the scholarly "
        "perspective it supports. Never invent author names or years.\n"
        "reference: 2-3 sentences explaining how the two rights connect "
        "according to this source; be specific about the mechanism.\n"
        "Return 3-4 sources."
    ),
}


def format_candidates(candidates: Sequence[CandidateSource]) -> str:
    """Zero-based numbered list of candidates."""
    return "\n".join(
        f"[{i}] {c.title} — {c.uri}" for i, c in enumerate(candidates)
    )


def build_extraction_prompt(
    query: str,
    text: str,
    candidates: Sequence[CandidateSource],
    category: SourceCategory,
) -> str:
    """User prompt for the extraction stage."""
    guidance = _CATEGORY_GUIDANCE.get(
        category, _CATEGORY_GUIDANCE[SourceCategory.LEGAL]
    )
    last = len(candidates) - 1
    return (
        f"## Request\n{query}\n\n"
        f"## Research notes\n{text}\n\n"
        f"## Candidate sources (valid urlIndex: 0-{last})\n"
        f"{format_candidates(candidates)}\n\n"
        f"## Field format\n{guidance}"
    )


# ── Semantic concept matching ─────────────────────────────────────

SEMANTIC_SYSTEM_PROMPT = """\
You map everyday words to human rights. Given a term and a catalog of rights, \
return the identifiers of the rights the term is most relevant to, as a JSON \
object {"rightIds": ["<id>", ...]}. Use only identifiers from the catalog. \
Return {"rightIds": []} if nothing is relevant."""


def build_semantic_prompt(
    term: str, rights: Sequence[HumanRight]
) -> str:
    catalog = json.dumps(
        [
            {"id": r.id, "name": r.name, "summary": r.summary}
            for r in rights
        ],
        ensure_ascii=False,
    )
    return f'Term: "{term}"\n\nRights: {catalog}'
