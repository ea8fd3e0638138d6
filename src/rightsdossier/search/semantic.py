"""Semantic concept matching for the rights search box.

A search term is resolved in three layers: a hard-coded instant table
for common everyday words, a process-wide cache of earlier model
answers, and a debounced model call asking which catalog rights the
term relates to. Results only ever grow for a given term; every layer
merges by set union.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Callable, Iterable, Sequence
from types import MappingProxyType
from typing import Any

from circuitbreaker import CircuitBreakerError
from pydantic import ValidationError

from rightsdossier.catalog import RIGHTS, HumanRight
from rightsdossier.config import Settings
from rightsdossier.constants import MIN_TERM_LENGTH
from rightsdossier.llm._llm_call import guarded_llm_call
from rightsdossier.prompts import (
    SEMANTIC_SYSTEM_PROMPT,
    build_semantic_prompt,
)
from rightsdossier.resilience.errors import SemanticResolutionFailure
from rightsdossier.sources.schemas import (
    SemanticMatchResponse,
    response_format_for,
)

logger = logging.getLogger(__name__)

SEMANTIC_RESPONSE_FORMAT = response_format_for(
    SemanticMatchResponse, "right_ids"
)

_INSTANT: dict[str, tuple[str, ...]] = {
    "food": ("25",),
    "eat": ("25",),
    "hungry": ("25",),
    "drink": ("25",),
    "water": ("25",),
    "house": ("25",),
    "home": ("12", "25"),
    "shelter": ("25",),
    "fair": ("7", "10"),
    "justice": ("8", "10"),
    "trial": ("10",),
    "court": ("8", "10"),
    "judge": ("10",),
    "police": ("9", "5"),
    "arrest": ("9",),
    "jail": ("9", "5"),
    "torture": ("5",),
    "pain": ("5",),
    "kill": ("3",),
    "murder": ("3",),
    "death": ("3",),
    "work": ("23",),
    "job": ("23",),
    "money": ("23", "25", "17"),
    "pay": ("23",),
    "school": ("26",),
    "learn": ("26",),
    "teacher": ("26",),
    "privacy": ("12",),
    "data": ("12",),
    "internet": ("12", "19"),
    "speak": ("19",),
    "voice": ("19", "21"),
    "vote": ("21",),
    "government": ("21",),
    "church": ("18",),
    "god": ("18",),
    "pray": ("18",),
    "travel": ("13",),
    "plane": ("13",),
    "border": ("13", "14"),
    "refugee": ("14",),
    "doctor": ("25",),
    "health": ("25",),
    "medicine": ("25",),
    "family": ("16",),
    "marry": ("16",),
    "child": ("16", "26"),
    "safety": ("3",),
    "equal": ("1", "7"),
    "racism": ("2",),
    "sexism": ("2",),
    "discrimination": ("2",),
}

INSTANT_MAP = MappingProxyType(_INSTANT)

_EMPTY: frozenset[str] = frozenset()


def normalize_term(term: str) -> str:
    return term.strip().lower()


def instant_matches(term: str) -> frozenset[str]:
    """Right ids the instant table maps ``term`` to. Never calls a model."""
    norm = normalize_term(term)
    if len(norm) < MIN_TERM_LENGTH:
        return _EMPTY
    return frozenset(INSTANT_MAP.get(norm, ()))


class SemanticCache:
    """Term → right ids learned from the model, for the process lifetime.

    Entries only grow: ``merge`` is a set union, so concurrent
    completions for the same term can land in any order.
    """

    def __init__(self) -> None:
        self._entries: dict[str, frozenset[str]] = {}

    def get(self, term: str) -> frozenset[str] | None:
        return self._entries.get(normalize_term(term))

    def merge(self, term: str, ids: Iterable[str]) -> frozenset[str]:
        key = normalize_term(term)
        merged = self._entries.get(key, _EMPTY) | frozenset(ids)
        self._entries[key] = merged
        return merged

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, term: object) -> bool:
        return isinstance(term, str) and normalize_term(term) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


_session_cache = SemanticCache()


def get_session_cache() -> SemanticCache:
    return _session_cache


def parse_semantic_ids(raw_json: str) -> list[str]:
    """Id strings from a concept-matching response.

    Accepts the ``{"rightIds": [...]}`` object, a bare array, or an
    object whose only useful member is an array. Anything else raises
    SemanticResolutionFailure.
    """
    try:
        data: Any = json.loads(raw_json)
    except json.JSONDecodeError as exc:
        raise SemanticResolutionFailure("response is not JSON") from exc

    if isinstance(data, dict):
        try:
            return SemanticMatchResponse.model_validate(data).right_ids
        except ValidationError:
            for value in data.values():  # pyright: ignore[reportUnknownVariableType]
                if isinstance(value, list):
                    data = value
                    break
    if not isinstance(data, list):
        raise SemanticResolutionFailure("response is not an id array")
    return [str(item) for item in data if isinstance(item, (str, int))]  # pyright: ignore[reportUnknownVariableType]


async def fetch_semantic_ids(
    term: str,
    rights: Sequence[HumanRight] = RIGHTS,
    settings: Settings | None = None,
) -> list[str]:
    """Ask the model which catalog rights ``term`` relates to.

    Returns known ids in catalog order. Raises SemanticResolutionFailure
    when every model fails or the payload is unusable.
    """
    if settings is None:
        settings = Settings()

    messages = [
        {"role": "system", "content": SEMANTIC_SYSTEM_PROMPT},
        {"role": "user", "content": build_semantic_prompt(term, rights)},
    ]

    last_error: Exception | None = None
    for model in settings.extraction_model_chain:
        try:
            result = await guarded_llm_call(
                model,
                messages,
                settings.llm_timeout_seconds,
                response_format=SEMANTIC_RESPONSE_FORMAT,
                api_key=settings.api_key_for(model),
            )
        except CircuitBreakerError as exc:
            logger.warning(
                "event=circuit_open model=%s component=semantic", model
            )
            last_error = exc
            continue
        except Exception as exc:
            logger.warning(
                "event=semantic_call_failed model=%s",
                model,
                exc_info=True,
            )
            last_error = exc
            continue

        returned = set(parse_semantic_ids(result.content))
        ids = [r.id for r in rights if r.id in returned]
        unknown = returned.difference(r.id for r in rights)
        if unknown:
            logger.debug(
                "event=semantic_unknown_ids term=%s count=%d",
                term,
                len(unknown),
            )
        logger.info(
            "event=semantic_resolved model=%s term=%s ids=%d",
            model,
            term,
            len(ids),
        )
        return ids

    raise SemanticResolutionFailure(
        "concept matching failed on every model"
    ) from last_error


async def get_semantic_rights(
    term: str,
    rights: Sequence[HumanRight] = RIGHTS,
    settings: Settings | None = None,
) -> list[str]:
    """Like fetch_semantic_ids, but any failure yields [].

    Terms shorter than two characters resolve to [] without a call.
    """
    norm = normalize_term(term)
    if len(norm) < MIN_TERM_LENGTH:
        return []
    try:
        return await fetch_semantic_ids(norm, rights, settings)
    except SemanticResolutionFailure as exc:
        logger.warning(
            "event=semantic_resolution_failed term=%s error=%s", term, exc
        )
        return []


UpdateCallback = Callable[[str, frozenset[str]], None]


class SemanticConceptMatcher:
    """Debounced concept matching for one search box.

    ``submit`` is called on every keystroke. It answers at once from
    the instant table and the cache, and on a cache miss schedules a
    model call after ``debounce_seconds`` of quiet. A newer keystroke
    cancels the pending timer but never a call already in flight;
    late completions still fill the cache, and only update the visible
    matches if their term is still the current one.
    A term whose call is still in flight is not queried again.
    """

    def __init__(
        self,
        rights: Sequence[HumanRight] = RIGHTS,
        settings: Settings | None = None,
        cache: SemanticCache | None = None,
        debounce_seconds: float | None = None,
        on_update: UpdateCallback | None = None,
    ) -> None:
        self._rights = tuple(rights)
        self._settings = settings or Settings()
        self._cache = cache if cache is not None else get_session_cache()
        self._debounce = (
            debounce_seconds
            if debounce_seconds is not None
            else self._settings.debounce_seconds
        )
        self._on_update = on_update
        self._current_term = ""
        self._current_matches: frozenset[str] = _EMPTY
        self._timer: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self._pending_terms: set[str] = set()

    @property
    def current_term(self) -> str:
        return self._current_term

    @property
    def current_matches(self) -> frozenset[str]:
        return self._current_matches

    @property
    def is_searching(self) -> bool:
        timer_pending = self._timer is not None and not self._timer.done()
        return timer_pending or bool(self._in_flight)

    def instant_matches(self, term: str) -> frozenset[str]:
        return instant_matches(term)

    def _known(self, term: str) -> tuple[frozenset[str], bool]:
        """Instant ∪ cached ids, and whether the cache had the term."""
        cached = self._cache.get(term)
        instant = instant_matches(term)
        if cached is None:
            return instant, False
        return instant | cached, True

    async def resolve(self, term: str) -> frozenset[str]:
        """Full resolution without debounce; failures fall back to known ids."""
        norm = normalize_term(term)
        if len(norm) < MIN_TERM_LENGTH:
            return _EMPTY
        known, hit = self._known(norm)
        if hit:
            return known
        try:
            ids = await fetch_semantic_ids(norm, self._rights, self._settings)
        except SemanticResolutionFailure as exc:
            logger.warning(
                "event=semantic_resolution_failed term=%s error=%s",
                norm,
                exc,
            )
            return known
        return known | self._cache.merge(norm, ids)

    def submit(self, term: str) -> frozenset[str]:
        """Handle a keystroke; returns the matches to show right now."""
        self._cancel_timer()
        norm = normalize_term(term)
        self._current_term = norm
        if len(norm) < MIN_TERM_LENGTH:
            self._current_matches = _EMPTY
            return _EMPTY

        known, hit = self._known(norm)
        self._current_matches = known
        if not hit and norm not in self._pending_terms:
            self._timer = asyncio.create_task(self._debounced(norm))
        return known

    def cancel(self) -> None:
        """Drop the pending debounce timer. In-flight calls still finish."""
        self._cancel_timer()

    async def wait_idle(self) -> None:
        """Wait until no timer is pending and no call is in flight."""
        while self.is_searching:
            timer = self._timer
            if timer is not None and not timer.done():
                with contextlib.suppress(asyncio.CancelledError):
                    await timer
                continue
            await asyncio.gather(*self._in_flight)

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
            logger.debug("event=semantic_debounce_cancelled")
        self._timer = None

    async def _debounced(self, term: str) -> None:
        await asyncio.sleep(self._debounce)
        if term in self._pending_terms:
            return
        self._pending_terms.add(term)
        task = asyncio.create_task(self._lookup(term))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        task.add_done_callback(lambda _: self._pending_terms.discard(term))

    async def _lookup(self, term: str) -> None:
        try:
            ids = await fetch_semantic_ids(term, self._rights, self._settings)
        except SemanticResolutionFailure as exc:
            logger.warning(
                "event=semantic_resolution_failed term=%s error=%s",
                term,
                exc,
            )
            return

        merged = self._cache.merge(term, ids)
        if term != self._current_term:
            logger.debug("event=semantic_result_stale term=%s", term)
            return
        self._current_matches = self._current_matches | merged
        if self._on_update is not None:
            self._on_update(term, self._current_matches)
