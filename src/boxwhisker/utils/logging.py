"""
Logging utilities for the boxwhisker library.

Library Logging Conventions
---------------------------
1. **Library code never calls configure_logging()** - it only uses get_logger(__name__).
2. **Applications/demos CAN call configure_logging()** - to get log output on stderr.
3. When imported by an application that has configured logging, all boxwhisker
   records flow into that application's handlers.

boxwhisker does NOT write any log files.

Example Usage
-------------
In library code (engine.py, diff_engine.py, etc.):
    ```python
    from boxwhisker.utils.logging import get_logger
    logger = get_logger(__name__)
    logger.info("render cycle finished")
    ```

In standalone scripts:
    ```python
    from boxwhisker.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "boxwhisker"
LEVEL_ENV_VAR = "BOXWHISKER_LOG_LEVEL"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

_LEVEL_NAMES = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


def resolve_level(level: Union[str, int, None]) -> tuple[int, bool]:
    """
    Turn a level name, number or numeric string into a logging level.

    Returns:
        (level, known). Unknown values resolve to INFO with known=False.
    """
    if level is None:
        return logging.INFO, True
    if isinstance(level, int):
        return level, True
    text = str(level).strip()
    if text.isdigit():
        return int(text), True
    name = text.upper()
    if name == "WARN":
        name = "WARNING"
    if name in _LEVEL_NAMES:
        return getattr(logging, name), True
    return logging.INFO, False


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure logging for the boxwhisker logger only (never root).

    Parameters
    ----------
    level:
        Logging level (e.g. "DEBUG", "INFO", 10). Defaults to the
        BOXWHISKER_LOG_LEVEL env var, or "INFO" if unset. An unknown value
        falls back to INFO and is reported once as a warning.
    fmt:
        Log message format. Defaults to DEFAULT_FMT.
    datefmt:
        Date format. Defaults to "%Y-%m-%d %H:%M:%S".
    force:
        If True, remove existing handlers before adding the new one. If False,
        do nothing when a stderr StreamHandler is already attached.
    """
    requested = level if level is not None else os.environ.get(LEVEL_ENV_VAR, "INFO")
    resolved, known = resolve_level(requested)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)

    formatter = logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)

    has_console = any(
        isinstance(h, logging.StreamHandler) and h.stream is sys.stderr for h in logger.handlers
    )
    if not has_console:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(resolved)
        console.setFormatter(formatter)
        logger.addHandler(console)

    if not known:
        source = "level argument" if level is not None else LEVEL_ENV_VAR
        logger.warning(f"unknown log level {requested!r} from {source}, using INFO")


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger by name.

    If name is None, returns the 'boxwhisker' logger.
    Otherwise, returns logging.getLogger(name).
    """
    if name is None:
        name = LOGGER_NAME
    return logging.getLogger(name)
