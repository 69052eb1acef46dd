import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from knowledge_hub import __version__
from knowledge_hub.config import config
from knowledge_hub.logging_config import configure_logging

from .errors import ApiError, api_error_handler, request_validation_handler
from .models.database import init_db
from .rate_limit import limiter
from .routes import ai, articles, catalog, health, suggestions

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup"""
    logger.info("Initializing database...")
    init_db()
    yield


app = FastAPI(
    title="Knowledge Hub API",
    version=__version__,
    description="Articles, reference data and the Hugo assistant for the Cognos knowledge hub",
    lifespan=lifespan,
)

# Configure rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.server.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-API-Key"],
    expose_headers=["Location"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """One access log line per request: method, path, status, duration"""
    start = time.monotonic()
    response = await call_next(request)
    elapsed = (time.monotonic() - start) * 1000
    logger.info(
        "%s %s %s %.1fms",
        request.method,
        request.url.path,
        response.status_code,
        elapsed,
    )
    return response


# Include routers
app.include_router(health.router)
app.include_router(articles.router)
app.include_router(catalog.router)
app.include_router(suggestions.router)
app.include_router(ai.router)


@app.get("/")
def root():
    """
    Root endpoint

    Returns basic information about the API service.
    """
    return {
        "message": "Knowledge Hub API",
        "version": __version__,
        "documentation": "/docs",
        "endpoints": {
            "health": "/health",
            "articles": "/api/articles",
            "article_search": "/api/articles/search",
            "article_detail": "/api/articles/{id}",
            "article_tags": "/api/articles/{id}/tags",
            "categories": "/api/categories",
            "tags": "/api/tags",
            "versions": "/api/versions",
            "modules": "/api/modules",
            "faqs": "/api/faqs",
            "suggestions": "/api/suggestions",
            "assistant": "/ai/query",
        },
    }
