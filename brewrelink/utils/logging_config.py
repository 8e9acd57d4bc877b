"""Logging configuration for the brewrelink command.

Called once at startup by main.py. Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    -v / -q flag  >  BREWRELINK_LOG_LEVEL env var  >  INFO (default)
"""

import logging
import os
import sys
from typing import Optional

from .constants import ENV_LOG_LEVEL

# INFO level - progress lines only, matches what a shell script would echo
_FMT_MINIMAL = "%(message)s"

# DEBUG level - full diagnostic with module:line
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"


def resolve_level(flag_level: Optional[str] = None) -> str:
    """Pick the effective level name from the CLI flag or environment."""
    if flag_level:
        return flag_level
    return os.environ.get(ENV_LOG_LEVEL) or "INFO"


def setup_logging(level: str = "INFO") -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        formatter = logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_DEBUG)
    else:
        formatter = logging.Formatter(_FMT_MINIMAL)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root.setLevel(numeric_level)

    logging.raiseExceptions = False


def _parse_level(level: Optional[str]) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.INFO
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.INFO
    return numeric
