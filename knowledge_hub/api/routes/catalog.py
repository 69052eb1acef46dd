"""
Reference data endpoints: categories, tags, versions, modules and FAQs

All read-only; rows are maintained directly in the database.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..models.schemas import (
    CategoryResponse,
    FAQResponse,
    ModuleResponse,
    TagResponse,
    VersionResponse,
)
from ..services.store import ArticleStore, get_store

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/categories", response_model=list[CategoryResponse])
def list_categories(store: ArticleStore = Depends(get_store)):
    return store.list_categories()


@router.get("/tags", response_model=list[TagResponse])
def list_tags(store: ArticleStore = Depends(get_store)):
    return store.list_tags()


@router.get("/versions", response_model=list[VersionResponse])
def list_versions(store: ArticleStore = Depends(get_store)):
    return store.list_versions()


@router.get("/modules", response_model=list[ModuleResponse])
def list_modules(store: ArticleStore = Depends(get_store)):
    return store.list_modules()


@router.get("/faqs", response_model=list[FAQResponse])
def list_faqs(
    article_id: Optional[int] = Query(None, description="Only FAQs linked to this article"),
    store: ArticleStore = Depends(get_store),
):
    """
    List FAQs, newest first

    Pass article_id to restrict the list to one article.
    """
    return store.list_faqs(article_id)
