"""Rights catalog, jurisdiction and search routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from rightsdossier.api.dependencies import get_matcher
from rightsdossier.api.schemas import APIResponse
from rightsdossier.catalog import (
    RIGHTS,
    filter_rights,
    jurisdiction_options,
    rights_by_category,
)
from rightsdossier.constants import RightCategory, Scope
from rightsdossier.search.semantic import (
    SemanticConceptMatcher,
    normalize_term,
)

router = APIRouter(prefix="/api", tags=["rights"])


def _catalog_order(ids: frozenset[str]) -> list[str]:
    return [r.id for r in RIGHTS if r.id in ids]


@router.get("/rights")
async def list_rights(
    category: RightCategory | None = Query(
        default=None, description="Filter by category"
    ),
) -> APIResponse:
    """The rights catalog, optionally one category."""
    rights = rights_by_category(category) if category else list(RIGHTS)
    return APIResponse(
        success=True,
        data=[r.to_dict() for r in rights],
    )


@router.get("/jurisdictions")
async def list_jurisdictions(
    scope: Scope = Query(default=Scope.INTERNATIONAL),
    q: str = Query(default="", description="Filter national options"),
) -> APIResponse:
    """Sub-scope options for a scope."""
    return APIResponse(
        success=True,
        data=jurisdiction_options(scope, q),
    )


@router.get("/rights/search")
async def search_rights(
    q: str = Query(min_length=1, max_length=200),
    matcher: SemanticConceptMatcher = Depends(get_matcher),
) -> APIResponse:
    """Keyword plus semantic rights search.

    Semantic resolution degrades to the instant and cached ids when the
    model is unavailable.
    """
    term = normalize_term(q)
    instant = matcher.instant_matches(term)
    resolved = await matcher.resolve(term)
    rights = filter_rights(RIGHTS, term, semantic_ids=resolved)
    return APIResponse(
        success=True,
        data={
            "term": term,
            "instant": _catalog_order(instant),
            "semantic": _catalog_order(resolved),
            "rights": [r.to_dict() for r in rights],
        },
    )
