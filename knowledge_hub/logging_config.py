"""
Logging setup shared by the API server and the scripts.
"""

import logging

from knowledge_hub.config import config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "groq", "mistralai")


def configure_logging() -> None:
    """Configure the root logger once; DEBUG when config.debug is set."""
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format=LOG_FORMAT,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    # SQL echo is governed by DB_ECHO, keep the engine logger out of DEBUG noise
    if not config.database.echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
