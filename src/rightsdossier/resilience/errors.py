"""Failure taxonomy and provider error classification.

Pipeline failures are typed so each boundary can convert them to its
own degraded value: the dialogue orchestrator turns retrieval and
extraction failures into a fallback citation, the semantic matcher
turns resolution failures into an empty id list.

Provider exceptions are classified by category for structured logs
and to decide which ones are worth retrying.
"""

from __future__ import annotations

import asyncio
from enum import Enum

from circuitbreaker import CircuitBreakerError


class DossierError(Exception):
    """Base class for pipeline failures."""


class RetrievalFailure(DossierError):
    """Search-grounded call errored or returned unusable output."""


class ExtractionFailure(DossierError):
    """Schema-constrained extraction call could not be completed."""


class ExtractionParseFailure(ExtractionFailure):
    """Extraction response was not JSON or did not match the schema."""


class SemanticResolutionFailure(DossierError):
    """Concept-matching call errored or returned a non-array payload."""


class ErrorClass(Enum):
    TRANSIENT = "transient"  # 429, network errors — retryable
    SERVER = "server"  # 500, 502, 503 — retryable
    TIMEOUT = "timeout"  # deadline exceeded — retryable with backoff
    CLIENT = "client"  # 400, 401, 403 — do NOT retry
    UNKNOWN = "unknown"  # unclassified — do NOT retry


def classify_error(error: BaseException) -> ErrorClass:
    """Classify an error to determine handling strategy.

    Pipeline failures are classified by their underlying cause when
    one is chained. Structured attributes (status_code) are checked
    before falling back to string matching.
    """
    if isinstance(error, DossierError) and error.__cause__ is not None:
        return classify_error(error.__cause__)
    if isinstance(error, CircuitBreakerError):
        # Open circuit: the model recovers on its own after a timeout.
        return ErrorClass.TRANSIENT

    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        if status_code == 429:
            return ErrorClass.TRANSIENT
        if 400 <= status_code < 500:
            return ErrorClass.CLIENT
        if 500 <= status_code < 600:
            return ErrorClass.SERVER

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorClass.TIMEOUT

    msg = str(error).lower()

    if "timeout" in msg or "timed out" in msg:
        return ErrorClass.TIMEOUT
    if "429" in msg or "rate limit" in msg or "rate_limit" in msg:
        return ErrorClass.TRANSIENT
    if any(code in msg for code in ("500", "502", "503", "504")):
        return ErrorClass.SERVER
    if "econnrefused" in msg or "connection" in msg:
        return ErrorClass.TRANSIENT
    if any(code in msg for code in ("400", "401", "403", "404")):
        return ErrorClass.CLIENT

    return ErrorClass.UNKNOWN


_RETRYABLE = frozenset({
    ErrorClass.TRANSIENT,
    ErrorClass.SERVER,
    ErrorClass.TIMEOUT,
})


def is_retryable(error: BaseException) -> bool:
    """Return True if the error category supports retry."""
    return classify_error(error) in _RETRYABLE
