"""
API Authentication module

Optional API key guard for the endpoints that modify articles. The key is
taken from config.security; reads never go through this dependency.
"""

import logging
import secrets
from typing import Optional

from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from knowledge_hub.config import config

from .errors import InvalidApiKey, MissingApiKey

logger = logging.getLogger(__name__)

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(
    request: Request, api_key: Optional[str] = Security(API_KEY_HEADER)
) -> Optional[str]:
    """
    Guard an article write with the X-API-Key header.

    Returns None when no key is configured, otherwise the accepted key.

    Raises:
        MissingApiKey: 401 if a key is configured and the header is absent
        InvalidApiKey: 403 if the header does not match
    """
    if not config.security.writes_protected:
        return None

    if not api_key:
        raise MissingApiKey()

    if not secrets.compare_digest(api_key.encode(), config.security.api_key.encode()):
        logger.warning("Rejected API key on %s %s", request.method, request.url.path)
        raise InvalidApiKey()

    return api_key
