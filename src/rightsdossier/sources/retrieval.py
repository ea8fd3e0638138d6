"""Grounded retrieval stage: search-backed answer plus observed sources."""

from __future__ import annotations

import logging
from typing import Any

from circuitbreaker import CircuitBreakerError

from rightsdossier.config import Settings
from rightsdossier.constants import PLACEHOLDER_SOURCE_TITLE
from rightsdossier.llm._llm_call import guarded_grounded_call
from rightsdossier.prompts import RETRIEVAL_SYSTEM_PROMPT
from rightsdossier.resilience.errors import RetrievalFailure
from rightsdossier.sources.value_objects import (
    CandidateSource,
    RetrievalResult,
)

logger = logging.getLogger(__name__)


def _field(obj: Any, *names: str) -> Any:
    """First present attribute or key among ``names``."""
    for name in names:
        if isinstance(obj, dict):
            value: Any = obj.get(name)  # pyright: ignore[reportUnknownMemberType]
        else:
            value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def candidates_from_grounding(
    grounding: list[Any],
) -> tuple[CandidateSource, ...]:
    """Distinct web sources listed in grounding metadata.

    Accepts camelCase or snake_case, dicts or objects. Chunks without a
    URI are dropped; a missing title becomes the placeholder.
    """
    seen: set[str] = set()
    out: list[CandidateSource] = []
    for entry in grounding:
        chunks = _field(entry, "groundingChunks", "grounding_chunks") or []
        for chunk in chunks:
            web = _field(chunk, "web")
            if web is None:
                continue
            uri = str(_field(web, "uri") or "").strip()
            if not uri or uri in seen:
                continue
            seen.add(uri)
            title = str(_field(web, "title") or "").strip()
            out.append(
                CandidateSource(
                    title=title or PLACEHOLDER_SOURCE_TITLE, uri=uri
                )
            )
    return tuple(out)


async def retrieve(
    query: str, settings: Settings | None = None
) -> RetrievalResult:
    """Run the grounded call over the model chain.

    Raises RetrievalFailure when every model fails or the answer is
    empty; never returns partial candidates.
    """
    if settings is None:
        settings = Settings()

    messages = [
        {"role": "system", "content": RETRIEVAL_SYSTEM_PROMPT},
        {"role": "user", "content": query},
    ]

    last_error: Exception | None = None
    for model in settings.grounded_model_chain:
        try:
            result = await guarded_grounded_call(
                model,
                messages,
                settings.llm_timeout_seconds,
                api_key=settings.api_key_for(model),
            )
        except CircuitBreakerError as exc:
            logger.warning(
                "event=circuit_open model=%s component=retrieval", model
            )
            last_error = exc
            continue
        except Exception as exc:
            logger.warning(
                "event=retrieval_failed model=%s",
                model,
                exc_info=True,
            )
            last_error = exc
            continue

        text = result.content.strip()
        if not text:
            logger.warning(
                "event=retrieval_empty_answer model=%s", model
            )
            last_error = RetrievalFailure(f"empty answer from {model}")
            continue

        candidates = candidates_from_grounding(result.grounding)
        logger.info(
            "event=retrieval_done model=%s candidates=%d text_len=%d",
            model,
            len(candidates),
            len(text),
        )
        return RetrievalResult(text=text, candidates=candidates)

    raise RetrievalFailure(
        "grounded retrieval failed on every model"
    ) from last_error
