"""
Autocomplete endpoint
"""

from fastapi import APIRouter, Depends, Request

from ..rate_limit import DEFAULT_RATE_LIMIT, limiter
from ..services.store import ArticleStore, get_store

router = APIRouter(prefix="/api", tags=["suggestions"])


@router.get("/suggestions", response_model=list[str])
@limiter.limit(DEFAULT_RATE_LIMIT)
def suggestions(request: Request, q: str = "", store: ArticleStore = Depends(get_store)):
    """
    Title suggestions for the search box

    Returns up to 8 distinct published titles whose title or summary
    contains q. An empty q returns an empty list without querying.
    """
    q = q.strip()
    if not q:
        return []
    return store.suggest_titles(q)
