"""
Assistant endpoint
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request

from ..errors import RequestValidationFailed
from ..models.schemas import ChatRequest, ChatResponse
from ..rate_limit import AI_RATE_LIMIT, limiter
from ..services.assistant import AssistantService, get_assistant_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/query", response_model=ChatResponse)
@limiter.limit(AI_RATE_LIMIT)
def query_assistant(
    request: Request,
    payload: Optional[ChatRequest] = Body(None),
    assistant: AssistantService = Depends(get_assistant_service),
):
    """
    Ask Hugo, the Cognos Analytics assistant

    Each request is answered on its own; no conversation history is kept.
    """
    message = (payload.message or "").strip() if payload else ""
    if not message:
        raise RequestValidationFailed("Message is required", kind="MissingMessage")

    return ChatResponse(reply=assistant.ask(payload.message))
