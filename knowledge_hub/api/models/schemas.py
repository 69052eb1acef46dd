"""
Pydantic models for API responses and requests
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ArticleStatus(str, Enum):
    """Valid article status values"""

    draft = "draft"
    published = "published"


class ArticleSummary(BaseModel):
    """Article row as returned by list and search"""

    id: int = Field(..., description="Unique article identifier")
    title: str = Field(..., description="Article title")
    summary: str = Field(..., description="Short article summary")
    source_url: str = Field(..., description="Where the full article lives")
    updated_at: Optional[datetime] = Field(None, description="Last modification time")
    version: Optional[str] = Field(None, description="Version label")
    category: Optional[str] = Field(None, description="Category name")
    module: Optional[str] = Field(None, description="Module name")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 42,
                "title": "XQE-DS-0014 when running a report",
                "summary": "Data source connection fails after upgrade.",
                "source_url": "https://example.com/kb/xqe-ds-0014",
                "updated_at": "2025-01-15T10:30:00",
                "version": "11.2.4",
                "category": "Troubleshooting",
                "module": "Reporting",
            }
        }
    )


class ArticleDetail(ArticleSummary):
    """Article with raw foreign keys, returned by detail, create and update"""

    status: Optional[ArticleStatus] = Field(None, description="draft or published")
    version_id: Optional[int] = None
    category_id: Optional[int] = None
    module_id: Optional[int] = None


class ArticleCreate(BaseModel):
    """Request body for creating an article

    Required text fields are declared optional so that a missing value is
    reported as MissingRequiredField rather than a schema error.
    """

    title: Optional[str] = None
    summary: Optional[str] = None
    source_url: Optional[str] = None
    status: ArticleStatus = ArticleStatus.published
    version_id: Optional[int] = None
    category_id: Optional[int] = None
    module_id: Optional[int] = None


class ArticleUpdate(BaseModel):
    """Request body for a partial article update

    Unknown keys are ignored; only fields explicitly sent are applied.
    """

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    summary: Optional[str] = None
    source_url: Optional[str] = None
    status: Optional[ArticleStatus] = None
    version_id: Optional[int] = None
    category_id: Optional[int] = None
    module_id: Optional[int] = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None


class TagResponse(BaseModel):
    id: int
    name: str


class VersionResponse(BaseModel):
    id: int
    label: str


class ModuleResponse(BaseModel):
    id: int
    name: str


class FAQResponse(BaseModel):
    id: int
    question: str
    answer: str
    article_id: Optional[int] = None
    created_at: Optional[datetime] = None


class ChatRequest(BaseModel):
    """Request body for the assistant"""

    message: Optional[str] = Field(None, description="User question")


class ChatResponse(BaseModel):
    reply: str = Field(..., description="Assistant answer, verbatim")


class ErrorResponse(BaseModel):
    """Standard error response model"""

    error: str = Field(..., description="Error message")
    kind: str = Field(..., description="Error kind, e.g. NotFound or InvalidReference")
    detail: Optional[str] = Field(None, description="Detailed error information (5xx only)")
    timestamp: datetime = Field(..., description="When error occurred")


class HealthResponse(BaseModel):
    """Response model for health check"""

    status: str = Field(..., description="Service health status")
    db: bool = Field(..., description="Whether the database answered")
    time: datetime = Field(..., description="Current timestamp")
