"""Dialogue orchestrator: retrieval → trust filter → extraction.

Each analysis kind runs the same chain with its own query and source
category. The UI never sees an exception: retrieval and extraction
failures become a single category-specific fallback citation flagged
as degraded.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from rightsdossier.config import Settings
from rightsdossier.constants import (
    CATEGORY_FOR_KIND,
    ID_HEX_LENGTH,
    AnalysisKind,
    DialogueState,
    Scope,
    SourceCategory,
)
from rightsdossier.logger import DossierLogger
from rightsdossier.resilience.errors import (
    DossierError,
    ErrorClass,
    classify_error,
    is_retryable,
)
from rightsdossier.sources.extraction import extract
from rightsdossier.sources.instructions import (
    build_instruction,
    build_nexus_query,
    build_status_query,
    scholar_search_url,
)
from rightsdossier.sources.retrieval import retrieve
from rightsdossier.sources.trust import filter_candidates
from rightsdossier.sources.value_objects import (
    AnalysisRequest,
    Citation,
    DialogueResult,
)

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[DialogueState, frozenset[DialogueState]] = {
    DialogueState.IDLE: frozenset({DialogueState.RETRIEVING}),
    DialogueState.RETRIEVING: frozenset(
        {DialogueState.EXTRACTING, DialogueState.FAILED}
    ),
    DialogueState.EXTRACTING: frozenset(
        {DialogueState.DONE, DialogueState.FAILED}
    ),
    DialogueState.DONE: frozenset(),
    DialogueState.FAILED: frozenset(),
}


@dataclass
class DialogueRun:
    """State of one request as it moves through the chain."""

    request_id: str
    kind: AnalysisKind
    state: DialogueState = DialogueState.IDLE
    history: list[DialogueState] = field(
        default_factory=lambda: [DialogueState.IDLE]
    )

    def advance(self, to: DialogueState) -> None:
        if to not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"illegal dialogue transition {self.state} -> {to}"
            )
        self.state = to
        self.history.append(to)


def legal_fallback() -> Citation:
    return Citation(
        title="Legal framework information temporarily unavailable",
        uri="https://www.ohchr.org/en/instruments-listings",
        reference=(
            "Unable to retrieve legal framework information at this "
            "time. Visit the UN Office of the High Commissioner for "
            "Human Rights for official treaty texts."
        ),
    )


def status_fallback(right_name: str) -> Citation:
    return Citation(
        title="Current status information temporarily unavailable",
        uri="https://www.hrw.org/world-report/2024",
        reference=(
            f"Unable to retrieve current status information for "
            f"{right_name}. Check Human Rights Watch, Amnesty "
            f"International, or UN Human Rights reports for recent "
            f"updates."
        ),
    )


def nexus_fallback(from_right: str, to_right: str) -> Citation:
    return Citation(
        title="Scholarly perspectives on rights interconnection",
        uri=scholar_search_url(from_right, to_right),
        reference=(
            f"Explore how {from_right} and {to_right} are "
            f"interconnected in human rights scholarship. Use the "
            f"search link to find peer-reviewed papers analyzing both "
            f"rights together."
        ),
    )


def fallback_for(request: AnalysisRequest) -> Citation:
    """Static citation shown when the pipeline could not complete."""
    if request.kind == AnalysisKind.STATUS:
        return status_fallback(request.right_name)
    if request.kind == AnalysisKind.NEXUS:
        return nexus_fallback(
            request.right_name, request.second_right or ""
        )
    return legal_fallback()


def query_for(request: AnalysisRequest) -> str:
    """Retrieval directive for a request."""
    if request.kind == AnalysisKind.STATUS:
        return build_status_query(
            request.right_name, request.scope, request.sub_scope
        )
    if request.kind == AnalysisKind.NEXUS:
        return build_nexus_query(
            request.right_name,
            request.second_right or "",
            request.scope,
            request.sub_scope,
        )
    return build_instruction(
        request.scope, request.sub_scope, request.right_name
    )


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 1)


class DialogueOrchestrator:
    """Runs the two-stage grounded pipeline for each analysis kind.

    Stateless apart from settings and logger, so one instance can
    serve concurrent requests; calls are idempotent and safe to retry.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        dossier_logger: DossierLogger | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._logger = dossier_logger
        self._new_id = id_factory or (
            lambda: uuid.uuid4().hex[:ID_HEX_LENGTH]
        )

    async def get_scope_analysis(
        self, right_name: str, scope: Scope | str, sub_scope: str = ""
    ) -> DialogueResult:
        """Legal instruments protecting ``right_name`` in a jurisdiction."""
        return await self.run(
            AnalysisRequest(
                kind=AnalysisKind.LEGAL,
                right_name=right_name,
                scope=Scope(scope),
                sub_scope=sub_scope or "",
            )
        )

    async def get_status_analysis(
        self, right_name: str, scope: Scope | str, sub_scope: str = ""
    ) -> DialogueResult:
        """Recent NGO and UN reporting on ``right_name``."""
        return await self.run(
            AnalysisRequest(
                kind=AnalysisKind.STATUS,
                right_name=right_name,
                scope=Scope(scope),
                sub_scope=sub_scope or "",
            )
        )

    async def get_nexus_analysis(
        self,
        from_right: str,
        to_right: str,
        scope: Scope | str,
        sub_scope: str = "",
    ) -> DialogueResult:
        """Scholarship on how two rights interconnect."""
        return await self.run(
            AnalysisRequest(
                kind=AnalysisKind.NEXUS,
                right_name=from_right,
                scope=Scope(scope),
                sub_scope=sub_scope or "",
                second_right=to_right,
            )
        )

    async def run(self, request: AnalysisRequest) -> DialogueResult:
        """Execute one request. Never raises for pipeline failures."""
        run = DialogueRun(request_id=self._new_id(), kind=request.kind)
        category: SourceCategory = CATEGORY_FOR_KIND[request.kind]
        query = query_for(request)
        started = time.monotonic()

        run.advance(DialogueState.RETRIEVING)
        stage_start = time.monotonic()
        try:
            retrieved = await retrieve(query, self._settings)
        except Exception as exc:
            self._stage(run, "retrieval", "error", stage_start, exc)
            return self._fail(run, request, query, exc, started)
        self._stage(run, "retrieval", "done", stage_start)

        accepted = filter_candidates(retrieved.candidates, category)
        logger.info(
            "event=trust_filter request_id=%s category=%s"
            " candidates=%d accepted=%d",
            run.request_id,
            category,
            len(retrieved.candidates),
            len(accepted),
        )

        run.advance(DialogueState.EXTRACTING)
        stage_start = time.monotonic()
        try:
            citations = await extract(
                query, retrieved.text, accepted, category, self._settings
            )
        except Exception as exc:
            self._stage(run, "extraction", "error", stage_start, exc)
            return self._fail(run, request, query, exc, started)
        self._stage(
            run,
            "extraction",
            "done" if accepted else "skipped",
            stage_start,
        )

        run.advance(DialogueState.DONE)
        result = DialogueResult(
            sources=tuple(citations),
            grounding_urls=retrieved.candidates,
        )
        if self._logger is not None:
            self._logger.log_request(
                request_id=run.request_id,
                kind=str(request.kind),
                query=query,
                candidates=len(retrieved.candidates),
                accepted=len(accepted),
                citations=len(citations),
                degraded=False,
                duration_ms=_elapsed_ms(started),
            )
        return result

    def _stage(
        self,
        run: DialogueRun,
        stage: str,
        status: str,
        start: float,
        error: Exception | None = None,
    ) -> None:
        if self._logger is None:
            return
        self._logger.log_stage(
            request_id=run.request_id,
            stage_name=stage,
            status=status,
            duration_ms=_elapsed_ms(start),
            error=str(error) if error is not None else None,
        )

    def _fail(
        self,
        run: DialogueRun,
        request: AnalysisRequest,
        query: str,
        error: Exception,
        started: float,
    ) -> DialogueResult:
        run.advance(DialogueState.FAILED)
        error_class = classify_error(error)
        if isinstance(error, DossierError):
            logger.warning(
                "event=dialogue_failed request_id=%s kind=%s"
                " error_class=%s retryable=%s error=%s",
                run.request_id,
                request.kind,
                error_class.value,
                is_retryable(error),
                error,
            )
        else:
            logger.exception(
                "event=dialogue_unexpected_error request_id=%s kind=%s",
                run.request_id,
                request.kind,
            )
            error_class = ErrorClass.UNKNOWN
        if self._logger is not None:
            self._logger.log_error(
                request_id=run.request_id,
                component=f"dialogue.{request.kind}",
                error=str(error),
                error_class=error_class.value,
            )
            self._logger.log_request(
                request_id=run.request_id,
                kind=str(request.kind),
                query=query,
                candidates=0,
                accepted=0,
                citations=1,
                degraded=True,
                duration_ms=_elapsed_ms(started),
            )
        return DialogueResult(
            sources=(fallback_for(request),),
            degraded=True,
        )


_default: DialogueOrchestrator | None = None


def get_orchestrator() -> DialogueOrchestrator:
    """Process-wide orchestrator built from environment settings."""
    global _default  # noqa: PLW0603
    if _default is None:
        _default = DialogueOrchestrator()
    return _default


async def get_scope_analysis(
    right_name: str, scope: Scope | str, sub_scope: str = ""
) -> DialogueResult:
    return await get_orchestrator().get_scope_analysis(
        right_name, scope, sub_scope
    )


async def get_status_analysis(
    right_name: str, scope: Scope | str, sub_scope: str = ""
) -> DialogueResult:
    return await get_orchestrator().get_status_analysis(
        right_name, scope, sub_scope
    )


async def get_nexus_analysis(
    from_right: str, to_right: str, scope: Scope | str, sub_scope: str = ""
) -> DialogueResult:
    return await get_orchestrator().get_nexus_analysis(
        from_right, to_right, scope, sub_scope
    )
