"""Structured extraction stage: index-bound citation selection.

The model only ever picks candidates by index. Every surviving match
gets its URI from the candidate list, so a citation can never carry a
URL the grounded search did not observe.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from circuitbreaker import CircuitBreakerError
from pydantic import ValidationError

from rightsdossier.config import Settings
from rightsdossier.constants import SourceCategory
from rightsdossier.llm._llm_call import guarded_llm_call
from rightsdossier.prompts import (
    EXTRACTION_SYSTEM_PROMPT,
    build_extraction_prompt,
)
from rightsdossier.resilience.errors import (
    ExtractionFailure,
    ExtractionParseFailure,
)
from rightsdossier.sources.schemas import (
    ExtractionEnvelope,
    ExtractionSchema,
    SourceMatch,
    response_format_for,
)
from rightsdossier.sources.value_objects import CandidateSource, Citation

logger = logging.getLogger(__name__)

EXTRACTION_RESPONSE_FORMAT = response_format_for(
    ExtractionSchema, "source_matches"
)


def parse_extraction(raw_json: str) -> list[dict[str, Any]]:
    """Raw match objects from an extraction response.

    The response must be a JSON object with a ``sourceMatches`` array;
    anything else raises ExtractionParseFailure.
    """
    try:
        data: Any = json.loads(raw_json)
    except json.JSONDecodeError as exc:
        logger.warning(
            "event=extraction_parse_failed reason=invalid_json"
            " response_len=%d",
            len(raw_json),
        )
        raise ExtractionParseFailure("response is not JSON") from exc
    try:
        envelope = ExtractionEnvelope.model_validate(data)
    except ValidationError as exc:
        logger.warning(
            "event=extraction_parse_failed reason=schema errors=%d",
            exc.error_count(),
        )
        raise ExtractionParseFailure(
            "response does not match the sourceMatches schema"
        ) from exc
    return envelope.source_matches


def citations_from_matches(
    matches: Sequence[dict[str, Any]],
    candidates: Sequence[CandidateSource],
) -> list[Citation]:
    """Validate matches against the candidate list and build citations.

    Matches with a non-integer or out-of-range urlIndex are dropped with
    a warning. A repeated index keeps its first match. The URI always
    comes from the candidate.
    """
    citations: list[Citation] = []
    used: set[int] = set()
    for position, raw in enumerate(matches):
        try:
            match = SourceMatch.model_validate(raw)
        except ValidationError:
            logger.warning(
                "event=source_match_dropped reason=invalid position=%d",
                position,
            )
            continue
        index = match.url_index
        if not 0 <= index < len(candidates):
            logger.warning(
                "event=source_match_dropped reason=index_out_of_range"
                " url_index=%d candidates=%d",
                index,
                len(candidates),
            )
            continue
        if index in used:
            logger.debug(
                "event=source_match_duplicate url_index=%d", index
            )
            continue
        used.add(index)
        candidate = candidates[index]
        citations.append(
            Citation(
                title=match.title.strip() or candidate.title,
                uri=candidate.uri,
                reference=match.reference.strip(),
                date=(match.year or "").strip() or None,
            )
        )
    return citations


async def extract(
    query: str,
    text: str,
    candidates: Sequence[CandidateSource],
    category: SourceCategory,
    settings: Settings | None = None,
) -> list[Citation]:
    """Select and annotate citations from trust-filtered candidates.

    An empty candidate list returns [] without calling the model.
    Raises ExtractionParseFailure on a malformed response and
    ExtractionFailure when every model in the chain fails.
    """
    if not candidates:
        logger.info("event=extraction_skipped reason=no_candidates")
        return []

    if settings is None:
        settings = Settings()

    messages = [
        {"role": "system", "content": EXTRACTION_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": build_extraction_prompt(
                query, text, candidates, category
            ),
        },
    ]

    last_error: Exception | None = None
    for model in settings.extraction_model_chain:
        try:
            result = await guarded_llm_call(
                model,
                messages,
                settings.llm_timeout_seconds,
                response_format=EXTRACTION_RESPONSE_FORMAT,
                api_key=settings.api_key_for(model),
            )
        except CircuitBreakerError as exc:
            logger.warning(
                "event=circuit_open model=%s component=extraction", model
            )
            last_error = exc
            continue
        except Exception as exc:
            logger.warning(
                "event=extraction_failed model=%s",
                model,
                exc_info=True,
            )
            last_error = exc
            continue

        matches = parse_extraction(result.content)
        citations = citations_from_matches(matches, candidates)
        logger.info(
            "event=extraction_done model=%s matches=%d citations=%d",
            model,
            len(matches),
            len(citations),
        )
        return citations

    raise ExtractionFailure(
        "extraction failed on every model"
    ) from last_error
