"""Logging for the ``finance_dashboard`` package.

All package loggers live under ``"finance_dashboard"``. Library code calls
``get_logger("finance_dashboard.<module>")`` and never attaches handlers; the
CLI callback calls ``configure_logging`` once, which installs one stderr
handler on the package logger.

The level comes from ``--log-level`` or, when absent, from the
``FINANCE_DASHBOARD_LOG_LEVEL`` environment variable (a level name such as
``DEBUG`` or a number). Unrecognized values are skipped; the default is ``INFO``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "finance_dashboard"
LEVEL_ENV_VAR = "FINANCE_DASHBOARD_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

_CONFIGURED = False


def _level_value(raw: int | str) -> int | None:
    if isinstance(raw, int):
        return raw
    text = raw.strip().upper()
    if text.isdigit():
        return int(text)
    return logging.getLevelNamesMapping().get(text)


def resolve_level(level: int | str | None = None) -> int:
    """Return the numeric level for ``level``, then ``LEVEL_ENV_VAR``, then INFO."""

    for candidate in (level, os.getenv(LEVEL_ENV_VAR)):
        if candidate is None or candidate == "":
            continue
        value = _level_value(candidate)
        if value is not None:
            return value
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str = DEFAULT_FORMAT,
    stream: IO[str] = sys.stderr,
) -> None:
    """Install the package handler. Later calls are no-ops.

    ``stream`` defaults to the process stderr captured at import time, so log
    lines never mix with command output redirected by a caller.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    resolved = resolve_level(level)
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.handlers = [
        h for h in pkg_logger.handlers if not isinstance(h, logging.NullHandler)
    ]

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt))
    handler.setLevel(resolved)
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(resolved)
    pkg_logger.propagate = False

    _CONFIGURED = True
    pkg_logger.debug(
        "Logging configured at %s (%s=%r)",
        logging.getLevelName(resolved),
        LEVEL_ENV_VAR,
        os.getenv(LEVEL_ENV_VAR),
    )


def get_logger(name: str) -> logging.Logger:
    # Silent until configured: a NullHandler keeps library use quiet.
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "PACKAGE_LOGGER",
    "LEVEL_ENV_VAR",
    "DEFAULT_FORMAT",
    "resolve_level",
    "configure_logging",
    "get_logger",
]
