"""
API services module
"""

from .assistant import AssistantService, assistant_service, get_assistant_service
from .store import ArticleStore, get_store

__all__ = [
    "ArticleStore",
    "AssistantService",
    "assistant_service",
    "get_assistant_service",
    "get_store",
]
