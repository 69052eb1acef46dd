import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ..models.schemas import HealthResponse
from ..rate_limit import DEFAULT_RATE_LIMIT, limiter
from ..services.store import ArticleStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
@limiter.limit(DEFAULT_RATE_LIMIT)
def health_check(request: Request, store: ArticleStore = Depends(get_store)):
    """
    Health check endpoint

    Reports liveness and whether the database answers a trivial query.
    """
    try:
        db_ok = store.ping()
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {str(e)}", exc_info=True)
        return JSONResponse(status_code=500, content={"status": "error", "error": str(e)})

    return HealthResponse(status="ok", db=db_ok, time=datetime.now(timezone.utc))
