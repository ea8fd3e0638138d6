"""Dossier analysis routes.

Pipeline failures never surface here: the orchestrator answers with a
degraded fallback citation, which is still a successful response.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from rightsdossier.api.dependencies import get_orchestrator
from rightsdossier.api.schemas import (
    AnalysisRequestBody,
    APIResponse,
    NexusRequestBody,
)
from rightsdossier.dialogue.orchestrator import DialogueOrchestrator
from rightsdossier.sources.value_objects import DialogueResult

router = APIRouter(prefix="/api/analysis", tags=["analysis"])


def _envelope(result: DialogueResult) -> APIResponse:
    return APIResponse(
        success=True,
        data=result.to_dict(),
        metadata={
            "degraded": result.degraded,
            "citations": len(result.sources),
        },
    )


@router.post("/legal")
async def legal_analysis(
    body: AnalysisRequestBody,
    orchestrator: DialogueOrchestrator = Depends(get_orchestrator),
) -> APIResponse:
    """Legal instruments protecting a right in a jurisdiction."""
    result = await orchestrator.get_scope_analysis(
        body.right_name, body.scope, body.sub_scope
    )
    return _envelope(result)


@router.post("/status")
async def status_analysis(
    body: AnalysisRequestBody,
    orchestrator: DialogueOrchestrator = Depends(get_orchestrator),
) -> APIResponse:
    """Current NGO and UN reporting on a right."""
    result = await orchestrator.get_status_analysis(
        body.right_name, body.scope, body.sub_scope
    )
    return _envelope(result)


@router.post("/nexus")
async def nexus_analysis(
    body: NexusRequestBody,
    orchestrator: DialogueOrchestrator = Depends(get_orchestrator),
) -> APIResponse:
    """Scholarship on the interconnection of two rights."""
    result = await orchestrator.get_nexus_analysis(
        body.from_right, body.to_right, body.scope, body.sub_scope
    )
    return _envelope(result)
