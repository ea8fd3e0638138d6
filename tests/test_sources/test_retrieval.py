"""Tests for the grounded retrieval stage."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from circuitbreaker import CircuitBreakerError

from rightsdossier.config import Settings
from rightsdossier.llm._llm_call import GroundedCallResult
from rightsdossier.resilience.errors import RetrievalFailure
from rightsdossier.sources.retrieval import (
    candidates_from_grounding,
    retrieve,
)
from rightsdossier.sources.value_objects import CandidateSource
from tests.conftest import grounding_chunks

_PATCH = "rightsdossier.sources.retrieval.guarded_grounded_call"


def _grounded(text: str, *pairs: tuple[str, str]) -> GroundedCallResult:
    return GroundedCallResult(
        content=text, model="m", grounding=grounding_chunks(*pairs)
    )


class TestCandidatesFromGrounding:
    def test_camel_case_dicts(self) -> None:
        grounding = grounding_chunks(
            ("OHCHR", "https://www.ohchr.org/a"),
            ("HRW", "https://www.hrw.org/b"),
        )
        assert candidates_from_grounding(grounding) == (
            CandidateSource("OHCHR", "https://www.ohchr.org/a"),
            CandidateSource("HRW", "https://www.hrw.org/b"),
        )

    def test_snake_case_objects(self) -> None:
        web = SimpleNamespace(title="UN", uri="https://www.un.org/x")
        entry = SimpleNamespace(
            grounding_chunks=[SimpleNamespace(web=web)]
        )
        assert candidates_from_grounding([entry]) == (
            CandidateSource("UN", "https://www.un.org/x"),
        )

    def test_missing_title_gets_placeholder(self) -> None:
        grounding = [{"groundingChunks": [{"web": {"uri": "https://a.org"}}]}]
        (candidate,) = candidates_from_grounding(grounding)
        assert candidate.title == "Source"

    def test_missing_uri_dropped(self) -> None:
        grounding = [
            {
                "groundingChunks": [
                    {"web": {"title": "No link"}},
                    {"web": {"title": "Blank", "uri": "  "}},
                    {"retrievedContext": {"uri": "gs://bucket"}},
                ]
            }
        ]
        assert candidates_from_grounding(grounding) == ()

    def test_duplicate_uri_first_wins(self) -> None:
        grounding = grounding_chunks(
            ("First", "https://www.ohchr.org/a"),
            ("Second", "https://www.ohchr.org/a"),
        )
        (candidate,) = candidates_from_grounding(grounding)
        assert candidate.title == "First"

    def test_empty(self) -> None:
        assert candidates_from_grounding([]) == ()
        assert candidates_from_grounding([{}]) == ()


class TestRetrieve:
    async def test_returns_text_and_candidates(
        self, settings: Settings
    ) -> None:
        mock = AsyncMock(
            return_value=_grounded(
                "  Article 12 UDHR protects privacy.  ",
                ("OHCHR", "https://www.ohchr.org/udhr"),
            )
        )
        with patch(_PATCH, mock):
            result = await retrieve("privacy treaties", settings)

        assert result.text == "Article 12 UDHR protects privacy."
        assert result.candidates == (
            CandidateSource("OHCHR", "https://www.ohchr.org/udhr"),
        )
        mock.assert_awaited_once()
        assert mock.call_args.args[0] == "gemini/model-a"
        messages = mock.call_args.args[1]
        assert messages[-1] == {"role": "user", "content": "privacy treaties"}

    async def test_falls_back_to_next_model(
        self, settings: Settings
    ) -> None:
        mock = AsyncMock(
            side_effect=[
                ConnectionError("down"),
                _grounded("answer", ("UN", "https://www.un.org/")),
            ]
        )
        with patch(_PATCH, mock):
            result = await retrieve("q", settings)

        assert result.text == "answer"
        assert [c.args[0] for c in mock.call_args_list] == [
            "gemini/model-a",
            "gemini/model-b",
        ]

    async def test_open_circuit_falls_through(
        self, settings: Settings
    ) -> None:
        mock = AsyncMock(
            side_effect=[
                CircuitBreakerError(None),
                _grounded("answer"),
            ]
        )
        with patch(_PATCH, mock):
            result = await retrieve("q", settings)
        assert result.text == "answer"
        assert result.candidates == ()

    async def test_all_models_fail(self, settings: Settings) -> None:
        mock = AsyncMock(side_effect=ConnectionError("down"))
        with (
            patch(_PATCH, mock),
            pytest.raises(RetrievalFailure) as info,
        ):
            await retrieve("q", settings)
        assert isinstance(info.value.__cause__, ConnectionError)
        assert mock.await_count == 2

    async def test_empty_answer_is_failure(self, settings: Settings) -> None:
        mock = AsyncMock(
            return_value=_grounded("   ", ("OHCHR", "https://ohchr.org"))
        )
        with patch(_PATCH, mock), pytest.raises(RetrievalFailure):
            await retrieve("q", settings)
