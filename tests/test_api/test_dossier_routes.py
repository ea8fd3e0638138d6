"""Tests for API routes using httpx AsyncClient."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from rightsdossier.config import Settings
from rightsdossier.dialogue.orchestrator import DialogueOrchestrator
from rightsdossier.main import app
from rightsdossier.resilience.errors import (
    RetrievalFailure,
    SemanticResolutionFailure,
)
from rightsdossier.search.semantic import (
    SemanticCache,
    SemanticConceptMatcher,
)
from rightsdossier.sources.value_objects import (
    CandidateSource,
    Citation,
    RetrievalResult,
)

_RETRIEVE = "rightsdossier.dialogue.orchestrator.retrieve"
_EXTRACT = "rightsdossier.dialogue.orchestrator.extract"
_FETCH = "rightsdossier.search.semantic.fetch_semantic_ids"


@pytest.fixture
async def client(settings: Settings) -> Any:
    """Test client with app.state populated directly (no lifespan)."""
    app.state.settings = settings
    app.state.orchestrator = DialogueOrchestrator(settings)
    app.state.matcher = SemanticConceptMatcher(
        settings=settings, cache=SemanticCache()
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()


class TestHealthRoutes:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"


class TestRightsRoutes:
    async def test_list_all(self, client: AsyncClient) -> None:
        resp = await client.get("/api/rights")
        body = resp.json()
        assert body["success"] is True
        assert len(body["data"]) == 30
        assert body["data"][0]["id"] == "1"

    async def test_list_by_category(self, client: AsyncClient) -> None:
        resp = await client.get("/api/rights", params={"category": "Cultural"})
        body = resp.json()
        assert [r["name"] for r in body["data"]] == ["Culture"]

    async def test_unknown_category_is_422(self, client: AsyncClient) -> None:
        resp = await client.get("/api/rights", params={"category": "Cosmic"})
        assert resp.status_code == 422

    async def test_regional_jurisdictions(self, client: AsyncClient) -> None:
        resp = await client.get(
            "/api/jurisdictions", params={"scope": "Regional"}
        )
        assert "European Union" in resp.json()["data"]

    async def test_national_jurisdictions_filtered(
        self, client: AsyncClient
    ) -> None:
        resp = await client.get(
            "/api/jurisdictions", params={"scope": "National", "q": "germ"}
        )
        assert resp.json()["data"] == ["Germany"]

    async def test_international_has_no_jurisdictions(
        self, client: AsyncClient
    ) -> None:
        resp = await client.get("/api/jurisdictions")
        assert resp.json()["data"] == []

    async def test_search_combines_instant_and_semantic(
        self, client: AsyncClient
    ) -> None:
        with patch(_FETCH, AsyncMock(return_value=["22", "25"])):
            resp = await client.get("/api/rights/search", params={"q": "Food"})
        data = resp.json()["data"]
        assert data["term"] == "food"
        assert data["instant"] == ["25"]
        assert data["semantic"] == ["22", "25"]
        assert [r["id"] for r in data["rights"]] == ["22", "25"]

    async def test_search_degrades_to_instant(
        self, client: AsyncClient
    ) -> None:
        fetch = AsyncMock(side_effect=SemanticResolutionFailure("down"))
        with patch(_FETCH, fetch):
            resp = await client.get("/api/rights/search", params={"q": "jail"})
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["semantic"] == ["5", "9"]

    async def test_search_keyword_match(self, client: AsyncClient) -> None:
        with patch(_FETCH, AsyncMock(return_value=[])):
            resp = await client.get(
                "/api/rights/search", params={"q": "asylum"}
            )
        ids = [r["id"] for r in resp.json()["data"]["rights"]]
        assert ids == ["14"]

    async def test_search_requires_term(self, client: AsyncClient) -> None:
        resp = await client.get("/api/rights/search")
        assert resp.status_code == 422


class TestAnalysisRoutes:
    async def test_legal_success(self, client: AsyncClient) -> None:
        candidate = CandidateSource("OHCHR", "https://www.ohchr.org/x")
        citation = Citation("ICCPR (1966)", candidate.uri, "Article 17: ...")
        with (
            patch(
                _RETRIEVE,
                AsyncMock(
                    return_value=RetrievalResult("notes", (candidate,))
                ),
            ),
            patch(_EXTRACT, AsyncMock(return_value=[citation])),
        ):
            resp = await client.post(
                "/api/analysis/legal",
                json={
                    "right_name": "Privacy",
                    "scope": "National",
                    "sub_scope": "Germany",
                },
            )
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["sources"] == [
            {
                "title": "ICCPR (1966)",
                "uri": "https://www.ohchr.org/x",
                "reference": "Article 17: ...",
            }
        ]
        assert body["data"]["groundingUrls"] == [candidate.to_dict()]
        assert body["metadata"]["degraded"] is False

    async def test_status_failure_is_still_200(
        self, client: AsyncClient
    ) -> None:
        with patch(_RETRIEVE, AsyncMock(side_effect=RetrievalFailure("x"))):
            resp = await client.post(
                "/api/analysis/status", json={"right_name": "Work"}
            )
        assert resp.status_code == 200
        body = resp.json()
        assert body["data"]["degraded"] is True
        (source,) = body["data"]["sources"]
        assert source["uri"] == "https://www.hrw.org/world-report/2024"

    async def test_nexus(self, client: AsyncClient) -> None:
        with patch(_RETRIEVE, AsyncMock(side_effect=RetrievalFailure("x"))):
            resp = await client.post(
                "/api/analysis/nexus",
                json={"from_right": "Work", "to_right": "Education"},
            )
        (source,) = resp.json()["data"]["sources"]
        assert source["uri"].startswith("https://scholar.google.com/")

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"right_name": ""},
            {"right_name": "Work", "scope": "Galactic"},
        ],
    )
    async def test_invalid_body_is_422(
        self, client: AsyncClient, body: dict[str, Any]
    ) -> None:
        resp = await client.post("/api/analysis/legal", json=body)
        assert resp.status_code == 422
