"""Logging setup shared by the docsum package and its entry points.

Modules only ask for a logger::

    from docsum.logging import get_logger
    logger = get_logger(__name__)

Entry points (CLI, API, Streamlit app) call ``configure_logging`` once.
"""

import logging
import os
import sys

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Subsystem tags prefixed to log messages
WINDOW = "[WINDOW]"
CHUNK = "[CHUNK]"
DISPATCH = "[DISPATCH]"
REDUCE = "[REDUCE]"
LLM = "[LLM]"
PIPELINE = "[PIPELINE]"
API = "[API]"
CLI = "[CLI]"


def configure_logging(level=None, fmt: str = DEFAULT_FORMAT, stream=sys.stderr) -> None:
    """Attach one stream handler to the root logger.

    With no explicit level, ``DOCSUM_DEBUG=1`` selects DEBUG, otherwise INFO.
    Calling it again only updates the level.
    """
    if level is None:
        level = logging.DEBUG if os.getenv("DOCSUM_DEBUG", "0") == "1" else logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
