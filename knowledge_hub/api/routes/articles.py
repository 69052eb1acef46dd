"""
Articles API endpoints
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Request, Response, status
from pydantic import ValidationError

from ..auth import verify_api_key
from ..errors import NotFound, RequestValidationFailed, describe_validation_errors
from ..models.schemas import (
    ArticleCreate,
    ArticleDetail,
    ArticleSummary,
    ArticleUpdate,
    TagResponse,
)
from ..rate_limit import DEFAULT_RATE_LIMIT, limiter
from ..services.article_search import SearchFilters
from ..services.store import ArticleStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["articles"])

REQUIRED_FIELDS = ("title", "summary", "source_url")

# Columns an update may not blank out
NON_NULLABLE_FIELDS = REQUIRED_FIELDS + ("status",)


def _blanked_fields(fields: dict) -> list[str]:
    """Return non-nullable fields that the update would set to null or blank."""
    return [
        name
        for name in NON_NULLABLE_FIELDS
        if name in fields and not (fields[name] or "").strip()
    ]


@router.get("/articles", response_model=list[ArticleSummary])
def list_articles(store: ArticleStore = Depends(get_store)):
    """
    List published articles

    Returns the 100 most recently updated published articles with their
    version, category and module labels.
    """
    return store.list_articles()


# Declared before /articles/{article_id} so "search" is not taken as an id
@router.get("/articles/search", response_model=list[ArticleSummary])
@limiter.limit(DEFAULT_RATE_LIMIT)
def search_articles(
    request: Request,
    keyword: Optional[str] = None,
    version: Optional[str] = None,
    category: Optional[str] = None,
    module: Optional[str] = None,
    store: ArticleStore = Depends(get_store),
):
    """
    Search published articles

    keyword matches title or summary case-insensitively; version, category
    and module match exactly, with "All" meaning no filter.
    """
    filters = SearchFilters.from_query(keyword, version, category, module)
    return store.search_articles(filters)


@router.get("/articles/{article_id}", response_model=ArticleDetail)
def get_article(article_id: int, store: ArticleStore = Depends(get_store)):
    """Get a specific article by ID"""
    article = store.get_article(article_id)
    if not article:
        raise NotFound("Article not found")
    return article


@router.get("/articles/{article_id}/tags", response_model=list[TagResponse])
def list_article_tags(article_id: int, store: ArticleStore = Depends(get_store)):
    """Tags attached to an article, by name"""
    return store.list_article_tags(article_id)


@router.post(
    "/articles",
    response_model=ArticleDetail,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(verify_api_key)],
)
def create_article(
    response: Response,
    payload: Optional[ArticleCreate] = Body(None),
    store: ArticleStore = Depends(get_store),
):
    """
    Create an article

    title, summary and source_url are required. status defaults to
    "published"; version, category and module ids default to null.
    """
    payload = payload or ArticleCreate()
    values = payload.model_dump(mode="json")

    if any(not (values[name] or "").strip() for name in REQUIRED_FIELDS):
        raise RequestValidationFailed(
            "title, summary and source_url are required", kind="MissingRequiredField"
        )

    new_id = store.create_article(values)
    logger.info("Created article %s", new_id)

    response.headers["Location"] = f"/api/articles/{new_id}"
    return store.get_article(new_id)


@router.put(
    "/articles/{article_id}",
    response_model=ArticleDetail,
    dependencies=[Depends(verify_api_key)],
)
def update_article(
    article_id: int,
    payload: Any = Body(None),
    store: ArticleStore = Depends(get_store),
):
    """
    Partially update an article

    Only title, summary, source_url, version_id, status, category_id and
    module_id are considered; any other key in the body is ignored.
    """
    # A missing article is reported as 404 whatever the body holds
    if store.get_article(article_id) is None:
        raise NotFound("Article not found")

    try:
        changes = ArticleUpdate.model_validate(payload if payload is not None else {})
    except ValidationError as e:
        raise RequestValidationFailed(
            describe_validation_errors(e.errors()), kind="InvalidRequest"
        ) from e

    fields = changes.model_dump(mode="json", exclude_unset=True)
    if not fields:
        raise RequestValidationFailed("Nothing to update", kind="NoUpdatableFields")

    blanked = _blanked_fields(fields)
    if blanked:
        raise RequestValidationFailed(
            f"{', '.join(blanked)} cannot be empty", kind="MissingRequiredField"
        )

    if store.update_article(article_id, fields) == 0:
        raise NotFound("Article not found")
    logger.info("Updated article %s (%s)", article_id, ", ".join(sorted(fields)))

    return store.get_article(article_id)


@router.delete(
    "/articles/{article_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(verify_api_key)],
)
def delete_article(article_id: int, store: ArticleStore = Depends(get_store)):
    """Delete an article by ID"""
    if store.delete_article(article_id) == 0:
        raise NotFound("Article not found")
    logger.info("Deleted article %s", article_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
