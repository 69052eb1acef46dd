"""
Knowledge Hub - Core Package

REST API over the Cognos knowledge base schema plus the Hugo assistant.
"""

from .config import Config, config

__version__ = "1.0.0"
__all__ = ["Config", "config", "__version__"]
