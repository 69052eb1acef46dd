"""
Rate limiting configuration for the API

Uses slowapi to limit request rates per client IP.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from knowledge_hub.config import config

DEFAULT_RATE_LIMIT = config.rate_limit.default
AI_RATE_LIMIT = config.rate_limit.ai

# Create limiter instance using client IP as the key
limiter = Limiter(key_func=get_remote_address, enabled=config.rate_limit.enabled)
