"""
Article store - gateway between the routes and the relational schema

All statements are parameterized. Database errors are translated here into
the API error taxonomy: foreign-key violations become InvalidReference,
everything else becomes StorageFailure carrying the driver message.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from fastapi import Depends
from sqlalchemy import DateTime, delete, func, insert, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import InvalidReference, StorageFailure
from ..models.database import Article, get_db
from .article_search import SearchFilters, build_search_query

logger = logging.getLogger(__name__)

SUGGESTION_LIMIT = 8

ARTICLE_DETAIL_SELECT = """
    SELECT a.id, a.title, a.summary, a.source_url, a.status, a.updated_at,
           a.version_id,  v.label AS version,
           a.category_id, c.name  AS category,
           a.module_id,   m.name  AS module
    FROM articles a
    LEFT JOIN versions   v ON a.version_id  = v.id
    LEFT JOIN categories c ON a.category_id = c.id
    LEFT JOIN modules    m ON a.module_id   = m.id
    WHERE a.id = :id
"""

SUGGESTIONS_SELECT = f"""
    SELECT DISTINCT title
    FROM articles
    WHERE status = 'published'
      AND (LOWER(title) LIKE :title_pattern OR LOWER(summary) LIKE :summary_pattern)
    LIMIT {SUGGESTION_LIMIT}
"""

_articles = Article.__table__

# Request field -> column it sets. Only these keys ever reach an UPDATE.
ARTICLE_SETTERS = {
    "title": _articles.c.title,
    "summary": _articles.c.summary,
    "source_url": _articles.c.source_url,
    "version_id": _articles.c.version_id,
    "status": _articles.c.status,
    "category_id": _articles.c.category_id,
    "module_id": _articles.c.module_id,
}

_FK_SQLSTATE = "23503"
_MYSQL_FK_ERRNO = 1452


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    """Tell a foreign-key failure apart from other integrity errors."""
    orig = exc.orig
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    if _FK_SQLSTATE in (getattr(orig, "pgcode", None), getattr(orig, "sqlstate", None)):
        return True
    args = getattr(orig, "args", ())
    if args and args[0] == _MYSQL_FK_ERRNO:
        return True
    return "FOREIGN KEY constraint failed" in str(orig)


def _typed(sql: str, **types):
    # Driver-independent datetime results for timestamp columns
    clause = text(sql)
    return clause.columns(**types) if types else clause


class ArticleStore:
    """Executes the API's statements against one session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _reading(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error("%s: %s", action, e, exc_info=True)
            raise StorageFailure(action, detail=str(e)) from e

    @contextmanager
    def _writing(self, action: str) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_foreign_key_violation(e):
                logger.info("%s: foreign key violation", action)
                raise InvalidReference() from e
            logger.error("%s: %s", action, e, exc_info=True)
            raise StorageFailure(action, detail=str(e)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("%s: %s", action, e, exc_info=True)
            raise StorageFailure(action, detail=str(e)) from e

    def _all(
        self, sql: str, params: Optional[dict] = None, **types
    ) -> list[dict[str, Any]]:
        rows = self.db.execute(_typed(sql, **types), params or {}).mappings().all()
        return [dict(row) for row in rows]

    def ping(self) -> bool:
        """Run a trivial query; raises SQLAlchemyError if the store is unreachable."""
        return self.db.execute(text("SELECT 1 AS ok")).scalar() == 1

    # Articles

    def list_articles(self) -> list[dict[str, Any]]:
        return self.search_articles(SearchFilters(), action="Error retrieving articles")

    def search_articles(
        self, filters: SearchFilters, action: str = "Search failed"
    ) -> list[dict[str, Any]]:
        query = build_search_query(filters)
        logger.debug("Article search with %d bound parameters", len(query.params))
        with self._reading(action):
            return self._all(query.sql, query.bind_params, updated_at=DateTime)

    def get_article(self, article_id: int) -> Optional[dict[str, Any]]:
        with self._reading("Error retrieving article"):
            rows = self._all(ARTICLE_DETAIL_SELECT, {"id": article_id}, updated_at=DateTime)
        return rows[0] if rows else None

    def create_article(self, values: dict[str, Any]) -> int:
        """Insert an article and return its new id."""
        with self._writing("Error creating article"):
            result = self.db.execute(insert(_articles).values(**values))
            new_id = result.inserted_primary_key[0]
        return new_id

    def update_article(self, article_id: int, fields: dict[str, Any]) -> int:
        """Apply allow-listed fields and return the affected row count."""
        values = {
            ARTICLE_SETTERS[name]: value
            for name, value in fields.items()
            if name in ARTICLE_SETTERS
        }
        values[_articles.c.updated_at] = func.current_timestamp()
        with self._writing("Error updating article"):
            result = self.db.execute(
                update(_articles).where(_articles.c.id == article_id).values(values)
            )
            affected = result.rowcount
        return affected

    def delete_article(self, article_id: int) -> int:
        with self._writing("Error deleting article"):
            result = self.db.execute(delete(_articles).where(_articles.c.id == article_id))
            affected = result.rowcount
        return affected

    def list_article_tags(self, article_id: int) -> list[dict[str, Any]]:
        with self._reading("Error retrieving article tags"):
            return self._all(
                """
                SELECT t.id, t.name
                FROM article_tags art
                JOIN tags t ON t.id = art.tag_id
                WHERE art.article_id = :article_id
                ORDER BY t.name
                """,
                {"article_id": article_id},
            )

    def suggest_titles(self, q: str) -> list[str]:
        """Return up to SUGGESTION_LIMIT distinct published titles matching q."""
        pattern = f"%{q.lower()}%"
        with self._reading("Error retrieving suggestions"):
            rows = self.db.execute(
                text(SUGGESTIONS_SELECT),
                {"title_pattern": pattern, "summary_pattern": pattern},
            ).all()
        return [row.title for row in rows]

    # Reference data

    def list_categories(self) -> list[dict[str, Any]]:
        with self._reading("Error retrieving categories"):
            return self._all("SELECT id, name, description FROM categories ORDER BY name")

    def list_tags(self) -> list[dict[str, Any]]:
        with self._reading("Error retrieving tags"):
            return self._all("SELECT id, name FROM tags ORDER BY name")

    def list_versions(self) -> list[dict[str, Any]]:
        with self._reading("Error retrieving versions"):
            return self._all("SELECT id, label FROM versions ORDER BY id")

    def list_modules(self) -> list[dict[str, Any]]:
        with self._reading("Error retrieving modules"):
            return self._all("SELECT id, name FROM modules ORDER BY name")

    def list_faqs(self, article_id: Optional[int] = None) -> list[dict[str, Any]]:
        sql = "SELECT id, question, answer, article_id, created_at FROM faqs"
        params = {}
        if article_id is not None:
            sql += " WHERE article_id = :article_id"
            params["article_id"] = article_id
        sql += " ORDER BY created_at DESC"
        with self._reading("Error retrieving FAQs"):
            return self._all(sql, params, created_at=DateTime)


def get_store(db: Session = Depends(get_db)) -> ArticleStore:
    """FastAPI dependency providing an ArticleStore bound to the request session"""
    return ArticleStore(db)
