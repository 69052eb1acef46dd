"""
Article search query builder

Turns optional search filters into one parameterized SELECT. Each filter
contributes a Predicate (clause template plus bound values) to an ordered
list; the statement is the base template, the AND-joined clauses and a
fixed ORDER BY / LIMIT suffix. Filter values never reach the SQL text.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

SEARCH_LIMIT = 100

# Sentinel sent by the UI dropdowns for "no filter"
ALL_SENTINEL = "All"

ARTICLE_SUMMARY_SELECT = """
    SELECT a.id, a.title, a.summary, a.source_url, a.updated_at,
           v.label AS version,
           c.name  AS category,
           m.name  AS module
    FROM articles a
    LEFT JOIN versions   v ON a.version_id  = v.id
    LEFT JOIN categories c ON a.category_id = c.id
    LEFT JOIN modules    m ON a.module_id   = m.id
    WHERE a.status = 'published'
"""

ORDER_SUFFIX = f"ORDER BY a.updated_at DESC LIMIT {SEARCH_LIMIT}"


@dataclass(frozen=True)
class Predicate:
    clause: str
    params: tuple[tuple[str, Any], ...]


@dataclass(frozen=True)
class SearchFilters:
    """Normalized search inputs; None means "not provided"."""

    keyword: Optional[str] = None
    version: Optional[str] = None
    category: Optional[str] = None
    module: Optional[str] = None

    @classmethod
    def from_query(
        cls,
        keyword: Optional[str] = None,
        version: Optional[str] = None,
        category: Optional[str] = None,
        module: Optional[str] = None,
    ) -> "SearchFilters":
        """Trim raw query values, dropping empty ones and the "All" sentinel."""
        keyword = _clean(keyword)
        return cls(
            keyword=keyword.lower() if keyword else None,
            version=_clean_choice(version),
            category=_clean_choice(category),
            module=_clean_choice(module),
        )


@dataclass(frozen=True)
class SearchQuery:
    sql: str
    params: list[tuple[str, Any]] = field(default_factory=list)

    @property
    def bind_params(self) -> dict[str, Any]:
        """Parameters keyed by bind name, as SQLAlchemy text() expects."""
        return dict(self.params)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _clean_choice(value: Optional[str]) -> Optional[str]:
    value = _clean(value)
    if value == ALL_SENTINEL:
        return None
    return value


def build_predicates(filters: SearchFilters) -> list[Predicate]:
    """Return predicates in fixed order: keyword, version, category, module."""
    predicates = []

    if filters.keyword:
        pattern = f"%{filters.keyword}%"
        predicates.append(
            Predicate(
                "(LOWER(a.title) LIKE :keyword_title OR LOWER(a.summary) LIKE :keyword_summary)",
                (("keyword_title", pattern), ("keyword_summary", pattern)),
            )
        )

    if filters.version:
        predicates.append(Predicate("v.label = :version", (("version", filters.version),)))

    if filters.category:
        predicates.append(Predicate("c.name = :category", (("category", filters.category),)))

    if filters.module:
        predicates.append(Predicate("m.name = :module", (("module", filters.module),)))

    return predicates


def build_search_query(filters: SearchFilters) -> SearchQuery:
    """Assemble the published-article search statement for the given filters."""
    predicates = build_predicates(filters)

    parts = [ARTICLE_SUMMARY_SELECT.rstrip()]
    parts.extend(f"      AND {p.clause}" for p in predicates)
    parts.append(f"    {ORDER_SUFFIX}")

    params = [param for p in predicates for param in p.params]
    return SearchQuery(sql="\n".join(parts), params=params)
