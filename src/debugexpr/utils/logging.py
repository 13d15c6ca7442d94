"""Logging setup for debugexpr.

Library modules only emit records through loguru; the CLI routes them by
calling :func:`setup_logging` once per process. Tokenizer matches are
logged at DEBUG and evaluation failures at WARNING, so ``--log-level DEBUG``
shows how an expression was split.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional, Union

from loguru import logger

LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

CONSOLE_FORMAT = "<level>{level: <7}</level> <dim>{extra[module]}</dim> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} {level: <7} {extra[module]}:{line} {message}"


def normalize_level(level: str) -> str:
    """Return the canonical loguru level name for ``level``.

    Raises:
        ValueError: If ``level`` is not a loguru level
    """
    name = str(level).strip().upper()
    if name not in LEVELS:
        raise ValueError(f"unknown log level {level!r}, expected one of {', '.join(LEVELS)}")
    return name


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[Union[str, Path]] = None,
    json_output: bool = False,
) -> None:
    """Route log records to stderr and, optionally, a file.

    Args:
        level: Minimum level, case-insensitive
        log_file: Also append records to this file
        json_output: Emit one JSON object per record on stderr instead of text

    Raises:
        ValueError: On an unknown level
    """
    level = normalize_level(level)

    logger.remove()
    logger.configure(extra={"module": "debugexpr"})

    if json_output:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, backtrace=False, diagnose=False)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level,
            format=FILE_FORMAT,
            rotation="1 MB",
            retention=2,
            encoding="utf-8",
        )


def get_logger(name: str) -> Any:
    """Logger whose records carry ``name`` as their module."""
    return logger.bind(module=name)
