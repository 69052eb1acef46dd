"""Tests for the article search query builder."""

import itertools

import pytest

from knowledge_hub.api.services.article_search import (
    SEARCH_LIMIT,
    SearchFilters,
    build_predicates,
    build_search_query,
)


class TestSearchFilters:
    """Test normalization of raw query values"""

    def test_empty_values_are_not_provided(self):
        filters = SearchFilters.from_query("", "  ", None, "\t")
        assert filters == SearchFilters()

    def test_all_sentinel_is_not_provided(self):
        filters = SearchFilters.from_query(version="All", category=" All ", module="All")
        assert filters.version is None
        assert filters.category is None
        assert filters.module is None

    def test_keyword_is_trimmed_and_lowered(self):
        filters = SearchFilters.from_query(keyword="  XQE Error ")
        assert filters.keyword == "xqe error"

    def test_keyword_all_is_a_real_keyword(self):
        """The sentinel only applies to the dropdown filters"""
        filters = SearchFilters.from_query(keyword="All")
        assert filters.keyword == "all"

    def test_exact_filters_keep_case(self):
        filters = SearchFilters.from_query(category=" Troubleshooting ")
        assert filters.category == "Troubleshooting"


class TestBuildSearchQuery:
    """Test SQL assembly"""

    def test_no_filters(self):
        query = build_search_query(SearchFilters())

        assert query.params == []
        assert "a.status = 'published'" in query.sql
        assert " AND " not in query.sql
        assert query.sql.rstrip().endswith(f"ORDER BY a.updated_at DESC LIMIT {SEARCH_LIMIT}")

    def test_keyword_binds_title_then_summary(self):
        query = build_search_query(SearchFilters(keyword="xqe"))

        assert query.params == [("keyword_title", "%xqe%"), ("keyword_summary", "%xqe%")]
        assert "LOWER(a.title) LIKE :keyword_title" in query.sql
        assert "LOWER(a.summary) LIKE :keyword_summary" in query.sql

    def test_parameter_order_is_fixed(self):
        filters = SearchFilters(
            keyword="gateway", version="12.0.0", category="Security", module="Reporting"
        )
        query = build_search_query(filters)

        assert [name for name, _ in query.params] == [
            "keyword_title",
            "keyword_summary",
            "version",
            "category",
            "module",
        ]
        assert query.sql.index("v.label") < query.sql.index("c.name = ")
        assert query.sql.index("c.name = ") < query.sql.index("m.name = ")

    def test_values_are_never_interpolated(self):
        hostile = "x'; DROP TABLE articles; --"
        query = build_search_query(
            SearchFilters(keyword=hostile, version=hostile, category=hostile, module=hostile)
        )

        assert hostile not in query.sql
        assert "DROP TABLE" not in query.sql
        assert query.bind_params["version"] == hostile

    def test_suffix_comes_last(self):
        query = build_search_query(SearchFilters(module="Dashboards"))
        assert query.sql.index("m.name = :module") < query.sql.index("ORDER BY")

    @pytest.mark.parametrize(
        "present",
        [
            combo
            for size in range(5)
            for combo in itertools.combinations(("keyword", "version", "category", "module"), size)
        ],
    )
    def test_predicates_match_provided_filters(self, present):
        """Every provided filter adds exactly one predicate, nothing else does"""
        filters = SearchFilters(**{name: "value" for name in present})
        predicates = build_predicates(filters)

        assert len(predicates) == len(present)
        bound = {name for p in predicates for name, _ in p.params}
        for name in ("version", "category", "module"):
            assert (name in bound) == (name in present)
        assert ("keyword_title" in bound) == ("keyword" in present)
