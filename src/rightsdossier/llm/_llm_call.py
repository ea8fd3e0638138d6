"""Shared LLM calls with per-model circuit breaker and rate-limit retry.

Two call shapes are used by the pipeline:

- ``guarded_llm_call``: plain or schema-constrained completion.
- ``guarded_grounded_call``: completion with the provider's web-search
  tool enabled, returning the grounding metadata alongside the text.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import litellm
from circuitbreaker import (  # pyright: ignore[reportUnknownVariableType]
    CircuitBreaker,
    CircuitBreakerError,
)
from litellm.exceptions import RateLimitError as LitellmRateLimitError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from rightsdossier.constants import (
    CB_LLM_FAILURE_THRESHOLD,
    CB_LLM_RECOVERY_TIMEOUT,
    LLM_MAX_OUTPUT_TOKENS,
    RETRY_INITIAL_WAIT,
    RETRY_MAX_ATTEMPTS,
    RETRY_MAX_WAIT,
)

logger = logging.getLogger(__name__)

# litellm stubs have partially unknown types — typed alias
if TYPE_CHECKING:
    _acompletion: Callable[..., Coroutine[Any, Any, Any]]
else:
    _acompletion = litellm.acompletion

# Provider-native web search tool (Gemini); litellm passes it through.
GOOGLE_SEARCH_TOOL: dict[str, Any] = {"googleSearch": {}}


@dataclass(frozen=True)
class LLMCallResult:
    """Structured return from guarded_llm_call with token metadata."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int


@dataclass(frozen=True)
class GroundedCallResult:
    """Completion text plus the raw grounding metadata entries."""

    content: str
    model: str
    grounding: list[Any] = field(default_factory=lambda: list[Any]())


def _is_non_rate_limit_error(
    thrown_type: type, thrown_value: BaseException
) -> bool:
    """Return True if NOT a rate limit error (counts as a CB failure).

    Rate limits are backpressure, not outages, so they never open the
    breaker.
    """
    return not issubclass(thrown_type, LitellmRateLimitError)


# Per-model registry: one provider's outage must not block the
# fallback models in the chain.
_breaker_registry: dict[str, CircuitBreaker] = {}  # pyright: ignore[reportUnknownVariableType]


def _get_breaker(model: str) -> CircuitBreaker:  # pyright: ignore[reportUnknownParameterType]
    """Get or create a circuit breaker for the given model."""
    if model not in _breaker_registry:
        _breaker_registry[model] = CircuitBreaker(  # pyright: ignore[reportUnknownMemberType]
            failure_threshold=CB_LLM_FAILURE_THRESHOLD,
            recovery_timeout=CB_LLM_RECOVERY_TIMEOUT,
            expected_exception=_is_non_rate_limit_error,
            name=f"llm_{model}",
        )
    return _breaker_registry[model]


async def _guarded_completion(**kwargs: Any) -> Any:
    model: str = kwargs["model"]
    breaker = _get_breaker(model)
    if breaker.opened:  # pyright: ignore[reportUnknownMemberType]
        raise CircuitBreakerError(breaker)  # pyright: ignore[reportUnknownArgumentType]
    with breaker:  # pyright: ignore[reportUnknownMemberType]
        return await _acompletion(**kwargs)


def _base_kwargs(
    model: str,
    messages: list[dict[str, str]],
    timeout: int,
    api_key: str | None,
) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "model": model,
        "messages": messages,
        "timeout": timeout,
        "max_tokens": LLM_MAX_OUTPUT_TOKENS,
    }
    if api_key:
        kwargs["api_key"] = api_key
    return kwargs


def _message_content(response: Any) -> str:
    choices: Any = getattr(response, "choices", None) or []
    if not choices:
        return ""
    return str(choices[0].message.content or "")


@retry(
    stop=stop_after_attempt(RETRY_MAX_ATTEMPTS),
    wait=wait_exponential_jitter(
        initial=RETRY_INITIAL_WAIT, max=RETRY_MAX_WAIT
    ),
    retry=retry_if_exception_type(LitellmRateLimitError),
    reraise=True,
)
async def guarded_llm_call(
    model: str,
    messages: list[dict[str, str]],
    timeout: int,
    *,
    response_format: dict[str, Any] | None = None,
    api_key: str | None = None,
) -> LLMCallResult:
    """Circuit-breaker-protected completion with rate-limit retry.

    ``response_format`` is forwarded as-is; pass a json_schema format
    to constrain the output shape.
    """
    kwargs = _base_kwargs(model, messages, timeout, api_key)
    if response_format is not None:
        kwargs["response_format"] = response_format
    response: Any = await _guarded_completion(**kwargs)

    usage: Any = getattr(response, "usage", None)
    return LLMCallResult(
        content=_message_content(response),
        model=model,
        input_tokens=int(getattr(usage, "prompt_tokens", 0) or 0),
        output_tokens=int(getattr(usage, "completion_tokens", 0) or 0),
    )


def _grounding_metadata(response: Any) -> list[Any]:
    """Grounding metadata entries litellm attached to a response."""
    meta: Any = getattr(response, "vertex_ai_grounding_metadata", None)
    if meta is None:
        hidden: Any = getattr(response, "_hidden_params", None)
        if isinstance(hidden, dict):
            meta = hidden.get("vertex_ai_grounding_metadata")
    if meta is None:
        return []
    if isinstance(meta, (list, tuple)):
        return list(meta)
    return [meta]


@retry(
    stop=stop_after_attempt(RETRY_MAX_ATTEMPTS),
    wait=wait_exponential_jitter(
        initial=RETRY_INITIAL_WAIT, max=RETRY_MAX_WAIT
    ),
    retry=retry_if_exception_type(LitellmRateLimitError),
    reraise=True,
)
async def guarded_grounded_call(
    model: str,
    messages: list[dict[str, str]],
    timeout: int,
    *,
    api_key: str | None = None,
) -> GroundedCallResult:
    """Search-grounded completion, same guards as guarded_llm_call."""
    kwargs = _base_kwargs(model, messages, timeout, api_key)
    kwargs["tools"] = [GOOGLE_SEARCH_TOOL]
    response: Any = await _guarded_completion(**kwargs)

    grounding = _grounding_metadata(response)
    logger.debug(
        "event=grounded_call_done model=%s grounding_entries=%d",
        model,
        len(grounding),
    )
    return GroundedCallResult(
        content=_message_content(response),
        model=model,
        grounding=grounding,
    )
