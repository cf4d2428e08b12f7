"""Logging setup for the proposal_builder package.

Modules log through ``logging.getLogger(__name__)``; this helper attaches a
single stream handler to the package logger so CLI runs can surface those
messages. Library callers that configure logging themselves never need it.

Example
-------
>>> import logging
>>> from proposal_builder.logging_config import configure_logging
>>> configure_logging(logging.DEBUG).name
'proposal_builder'
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
PACKAGE_LOGGER = "proposal_builder"


def configure_logging(level: int = logging.WARNING) -> logging.Logger:
    """Configure and return the package logger.

    Calling this more than once only updates the level; handlers are added
    once.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


__all__ = ["LOG_FORMAT", "PACKAGE_LOGGER", "configure_logging"]
