"""Shared test fixtures — demo keys, breaker and cache resets, fakes."""

import os

# Force demo API keys for all tests — no real LLM calls.
# These are set unconditionally at import time, so even if you have
# real keys in your shell environment, pytest overwrites them before
# any Settings() is created. To use real keys, edit these lines.
os.environ["GEMINI_API_KEY"] = "for-demo-purposes-only"
os.environ["OPENAI_API_KEY"] = "for-demo-purposes-only"

from typing import Any

import pytest
from circuitbreaker import CircuitBreakerMonitor
from tenacity import wait_none

from rightsdossier.config import Settings
from rightsdossier.llm._llm_call import (
    _breaker_registry,
    guarded_grounded_call,
    guarded_llm_call,
)
from rightsdossier.search.semantic import get_session_cache


@pytest.fixture(autouse=True)
def _reset_breakers() -> None:
    """Reset circuit breakers between tests."""
    _breaker_registry.clear()
    for cb in CircuitBreakerMonitor.get_circuits():
        cb.reset()  # type: ignore[union-attr]


@pytest.fixture(autouse=True)
def _disable_retry_wait() -> Any:
    """Disable tenacity wait time for fast tests."""
    calls = (guarded_llm_call, guarded_grounded_call)
    originals = [c.retry.wait for c in calls]  # type: ignore[attr-defined]
    for c in calls:
        c.retry.wait = wait_none()  # type: ignore[attr-defined]
    yield
    for c, original in zip(calls, originals, strict=True):
        c.retry.wait = original  # type: ignore[attr-defined]


@pytest.fixture(autouse=True)
def _clear_session_cache() -> Any:
    """The semantic cache is process-scoped; isolate tests from it."""
    get_session_cache().clear()
    yield
    get_session_cache().clear()


@pytest.fixture
def settings() -> Settings:
    """Two-model chains so fallback paths are exercised."""
    return Settings(
        grounded_model_chain=["gemini/model-a", "gemini/model-b"],
        extraction_model_chain=["gemini/model-a", "gemini/model-b"],
        llm_timeout_seconds=5,
        semantic_debounce_ms=10,
    )


def mock_response(
    content: str, grounding: Any = None, *, hidden: bool = False
) -> Any:
    """Build a mock litellm response, optionally with grounding metadata.

    ``hidden`` places the metadata in ``_hidden_params`` instead of on
    the response object, as some litellm versions do.
    """
    msg = type("Msg", (), {"content": content})()
    choice = type("Choice", (), {"message": msg})()
    usage = type(
        "Usage",
        (),
        {"prompt_tokens": 100, "completion_tokens": 50},
    )()
    attrs: dict[str, Any] = {"choices": [choice], "usage": usage}
    if grounding is not None:
        if hidden:
            attrs["_hidden_params"] = {
                "vertex_ai_grounding_metadata": grounding
            }
        else:
            attrs["vertex_ai_grounding_metadata"] = grounding
    return type("Response", (), attrs)()


def grounding_chunks(*pairs: tuple[str, str]) -> list[dict[str, Any]]:
    """Gemini-style grounding metadata for (title, uri) pairs."""
    return [
        {
            "groundingChunks": [
                {"web": {"title": title, "uri": uri}}
                for title, uri in pairs
            ]
        }
    ]
