"""Tests for the structured extraction stage."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from rightsdossier.config import Settings
from rightsdossier.constants import SourceCategory
from rightsdossier.llm._llm_call import LLMCallResult
from rightsdossier.prompts import build_extraction_prompt
from rightsdossier.resilience.errors import (
    ExtractionFailure,
    ExtractionParseFailure,
)
from rightsdossier.sources.extraction import (
    EXTRACTION_RESPONSE_FORMAT,
    citations_from_matches,
    extract,
    parse_extraction,
)
from rightsdossier.sources.trust import filter_candidates
from rightsdossier.sources.value_objects import CandidateSource, Citation

_PATCH = "rightsdossier.sources.extraction.guarded_llm_call"

_CANDIDATES = (
    CandidateSource("OHCHR - ICCPR", "https://www.ohchr.org/iccpr"),
    CandidateSource("UN Treaty Collection", "https://treaties.un.org/x"),
)


def _llm(payload: Any) -> LLMCallResult:
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return LLMCallResult(
        content=content, model="m", input_tokens=1, output_tokens=1
    )


class TestParseExtraction:
    def test_valid_envelope(self) -> None:
        raw = json.dumps({"sourceMatches": [{"urlIndex": 0}]})
        assert parse_extraction(raw) == [{"urlIndex": 0}]

    def test_invalid_json(self) -> None:
        with pytest.raises(ExtractionParseFailure):
            parse_extraction("Here are the sources: [0]")

    @pytest.mark.parametrize(
        "payload",
        [
            [{"urlIndex": 0}],
            {"matches": [{"urlIndex": 0}]},
            {"sourceMatches": "0"},
            None,
        ],
    )
    def test_wrong_shape(self, payload: Any) -> None:
        with pytest.raises(ExtractionParseFailure):
            parse_extraction(json.dumps(payload))

    def test_parse_failure_is_extraction_failure(self) -> None:
        with pytest.raises(ExtractionFailure):
            parse_extraction("{")


class TestCitationsFromMatches:
    def test_uri_copied_from_candidate(self) -> None:
        matches = [
            {
                "urlIndex": 1,
                "title": "ICCPR (1966)",
                "reference": "Article 17: No one shall...",
                "uri": "https://evil.example/fabricated",
            }
        ]
        (citation,) = citations_from_matches(matches, _CANDIDATES)
        assert citation == Citation(
            title="ICCPR (1966)",
            uri="https://treaties.un.org/x",
            reference="Article 17: No one shall...",
        )

    def test_out_of_range_dropped(self) -> None:
        """An index past the end of the list never becomes a citation."""
        matches = [{"urlIndex": 5, "title": "X", "reference": "Y"}]
        assert citations_from_matches(matches, _CANDIDATES) == []

    def test_negative_index_dropped(self) -> None:
        matches = [{"urlIndex": -1, "title": "X", "reference": "Y"}]
        assert citations_from_matches(matches, _CANDIDATES) == []

    @pytest.mark.parametrize("bad", ["0", 0.0, True, None, [0]])
    def test_non_integer_index_dropped(self, bad: Any) -> None:
        matches = [{"urlIndex": bad, "title": "X", "reference": "Y"}]
        assert citations_from_matches(matches, _CANDIDATES) == []

    def test_missing_index_dropped(self) -> None:
        assert citations_from_matches([{"title": "X"}], _CANDIDATES) == []

    def test_bad_match_does_not_drop_siblings(self) -> None:
        matches = [
            {"urlIndex": 9, "title": "bad"},
            {"urlIndex": 0, "title": "good", "reference": "r"},
        ]
        (citation,) = citations_from_matches(matches, _CANDIDATES)
        assert citation.title == "good"

    def test_repeated_index_keeps_first(self) -> None:
        matches = [
            {"urlIndex": 0, "title": "first", "reference": "a"},
            {"urlIndex": 0, "title": "second", "reference": "b"},
        ]
        (citation,) = citations_from_matches(matches, _CANDIDATES)
        assert citation.title == "first"

    def test_empty_title_falls_back_to_candidate(self) -> None:
        matches = [{"urlIndex": 0, "title": "  ", "reference": None}]
        (citation,) = citations_from_matches(matches, _CANDIDATES)
        assert citation.title == "OHCHR - ICCPR"
        assert citation.reference == ""

    def test_numeric_year_becomes_date(self) -> None:
        matches = [{"urlIndex": 0, "title": "t", "year": 2024}]
        (citation,) = citations_from_matches(matches, _CANDIDATES)
        assert citation.date == "2024"

    def test_order_follows_model(self) -> None:
        matches = [{"urlIndex": 1}, {"urlIndex": 0}]
        citations = citations_from_matches(matches, _CANDIDATES)
        assert [c.uri for c in citations] == [
            "https://treaties.un.org/x",
            "https://www.ohchr.org/iccpr",
        ]


class TestExtractionPrompt:
    def test_filtered_candidates_only(self) -> None:
        """Only trusted candidates are enumerated, from index 0."""
        raw = [
            CandidateSource("A", "https://ohchr.org/x"),
            CandidateSource("B", "https://wikipedia.org/y"),
        ]
        accepted = filter_candidates(raw, SourceCategory.LEGAL)
        prompt = build_extraction_prompt(
            "q", "notes", accepted, SourceCategory.LEGAL
        )
        assert "[0] A — https://ohchr.org/x" in prompt
        assert "[1]" not in prompt
        assert "wikipedia" not in prompt
        assert "valid urlIndex: 0-0" in prompt

    def test_response_format_is_json_schema(self) -> None:
        assert EXTRACTION_RESPONSE_FORMAT["type"] == "json_schema"
        schema = EXTRACTION_RESPONSE_FORMAT["json_schema"]["schema"]
        assert "sourceMatches" in schema["properties"]


class TestExtract:
    async def test_empty_candidates_skip_model(
        self, settings: Settings
    ) -> None:
        mock = AsyncMock()
        with patch(_PATCH, mock):
            result = await extract(
                "q", "notes", [], SourceCategory.LEGAL, settings
            )
        assert result == []
        mock.assert_not_awaited()

    async def test_happy_path(self, settings: Settings) -> None:
        mock = AsyncMock(
            return_value=_llm(
                {
                    "sourceMatches": [
                        {
                            "urlIndex": 0,
                            "title": "ICCPR (1966)",
                            "reference": "Article 17: ...",
                        }
                    ]
                }
            )
        )
        with patch(_PATCH, mock):
            result = await extract(
                "q", "notes", _CANDIDATES, SourceCategory.LEGAL, settings
            )

        assert [c.uri for c in result] == ["https://www.ohchr.org/iccpr"]
        assert (
            mock.call_args.kwargs["response_format"]
            == EXTRACTION_RESPONSE_FORMAT
        )
        user_prompt = mock.call_args.args[1][-1]["content"]
        assert "[1] UN Treaty Collection" in user_prompt

    async def test_out_of_range_index_yields_no_sources(
        self, settings: Settings
    ) -> None:
        mock = AsyncMock(
            return_value=_llm(
                {"sourceMatches": [{"urlIndex": 5, "title": "X", "reference": "Y"}]}
            )
        )
        with patch(_PATCH, mock):
            result = await extract(
                "q", "notes", _CANDIDATES, SourceCategory.LEGAL, settings
            )
        assert result == []

    async def test_malformed_response_raises(
        self, settings: Settings
    ) -> None:
        mock = AsyncMock(return_value=_llm("not json"))
        with patch(_PATCH, mock), pytest.raises(ExtractionParseFailure):
            await extract(
                "q", "notes", _CANDIDATES, SourceCategory.LEGAL, settings
            )

    async def test_call_error_falls_back_to_next_model(
        self, settings: Settings
    ) -> None:
        mock = AsyncMock(
            side_effect=[
                TimeoutError(),
                _llm({"sourceMatches": [{"urlIndex": 1}]}),
            ]
        )
        with patch(_PATCH, mock):
            result = await extract(
                "q", "notes", _CANDIDATES, SourceCategory.LEGAL, settings
            )
        assert [c.uri for c in result] == ["https://treaties.un.org/x"]
        assert mock.await_count == 2

    async def test_all_models_fail(self, settings: Settings) -> None:
        mock = AsyncMock(side_effect=ConnectionError("down"))
        with patch(_PATCH, mock), pytest.raises(ExtractionFailure) as info:
            await extract(
                "q", "notes", _CANDIDATES, SourceCategory.LEGAL, settings
            )
        assert not isinstance(info.value, ExtractionParseFailure)
