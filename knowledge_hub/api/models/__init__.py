"""
API Models Module

This module contains database models and Pydantic schemas for the API.
"""

# Export models for easy importing
from .schemas import (  # noqa: F401
    ArticleCreate,
    ArticleDetail,
    ArticleStatus,
    ArticleSummary,
    ArticleUpdate,
    CategoryResponse,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    FAQResponse,
    HealthResponse,
    ModuleResponse,
    TagResponse,
    VersionResponse,
)

__all__ = [
    "ArticleCreate",
    "ArticleDetail",
    "ArticleStatus",
    "ArticleSummary",
    "ArticleUpdate",
    "CategoryResponse",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "FAQResponse",
    "HealthResponse",
    "ModuleResponse",
    "TagResponse",
    "VersionResponse",
]
