"""
Logging utilities for the nicezoom library.

Library code only ever asks for a logger:

    ```python
    from nicezoom.utils.logging import get_logger
    logger = get_logger(__name__)
    logger.debug("drag session started")
    ```

Standalone demos and scripts may turn on console output:

    ```python
    from nicezoom.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When nicezoom is embedded in an application that configured logging itself,
all nicezoom records flow to that application's handlers. nicezoom never
writes log files.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

# Default format for nicezoom logs
DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

LOG_LEVEL_ENV = "NICEZOOM_LOG_LEVEL"


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure logging for the nicezoom logger only (never root).

    Parameters
    ----------
    level:
        Logging level (e.g. "DEBUG", "INFO"). Defaults to the NICEZOOM_LOG_LEVEL
        env var, or "INFO" if unset.
    fmt:
        Log message format. Defaults to a standard format.
    datefmt:
        Date format. Defaults to "%Y-%m-%d %H:%M:%S".
    force:
        If True, remove existing handlers before adding a new one. If False,
        skip when a stderr handler is already present.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("nicezoom")
    logger.setLevel(level)

    formatter = logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        for h in logger.handlers:
            if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
                return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger by name, defaulting to the package logger 'nicezoom'.
    """
    if name is None:
        name = "nicezoom"
    return logging.getLogger(name)
