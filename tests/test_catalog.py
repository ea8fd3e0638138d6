"""Tests for the static rights catalog."""

from rightsdossier.catalog import (
    COUNTRIES,
    REGIONS,
    RIGHTS,
    filter_rights,
    get_right,
    get_right_by_name,
    jurisdiction_options,
    rights_by_category,
)
from rightsdossier.constants import RightCategory, Scope


class TestCatalog:
    def test_thirty_articles(self) -> None:
        assert [r.id for r in RIGHTS] == [str(i) for i in range(1, 31)]

    def test_ids_unique(self) -> None:
        assert len({r.id for r in RIGHTS}) == len(RIGHTS)

    def test_get_right(self) -> None:
        right = get_right("26")
        assert right is not None
        assert right.name == "Education"
        assert get_right("99") is None

    def test_get_right_by_name_case_insensitive(self) -> None:
        right = get_right_by_name("  privacy ")
        assert right is not None
        assert right.id == "12"

    def test_to_dict(self) -> None:
        data = get_right("27").to_dict()  # type: ignore[union-attr]
        assert data["category"] == "Cultural"
        assert data["name"] == "Culture"

    def test_rights_by_category(self) -> None:
        ids = [r.id for r in rights_by_category(RightCategory.POLITICAL)]
        assert ids == ["20", "21", "28"]


class TestJurisdictions:
    def test_regional_lists_regions(self) -> None:
        assert jurisdiction_options(Scope.REGIONAL) == list(REGIONS)

    def test_international_has_none(self) -> None:
        assert jurisdiction_options(Scope.INTERNATIONAL) == []

    def test_national_filters_by_query(self) -> None:
        assert jurisdiction_options(Scope.NATIONAL, "germ") == ["Germany"]
        assert jurisdiction_options(Scope.NATIONAL) == list(COUNTRIES)


class TestFilterRights:
    def test_empty_term_returns_all(self) -> None:
        assert filter_rights(RIGHTS, "  ") == list(RIGHTS)

    def test_keyword_matches_summary(self) -> None:
        ids = [r.id for r in filter_rights(RIGHTS, "leisure")]
        assert ids == ["24"]

    def test_semantic_ids_union_keyword(self) -> None:
        ids = [
            r.id
            for r in filter_rights(RIGHTS, "leisure", semantic_ids=["5"])
        ]
        assert ids == ["5", "24"]

    def test_category_restricts_pool(self) -> None:
        ids = [
            r.id
            for r in filter_rights(
                RIGHTS, "", category=RightCategory.CULTURAL
            )
        ]
        assert ids == ["27"]
