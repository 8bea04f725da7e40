# ruff: noqa: E402, I001
from __future__ import annotations

import io
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [p for p in [str(_ROOT / "packages"), str(_ROOT)] if p not in sys.path]

from finance_dashboard import logging_setup
from finance_dashboard.logging_setup import (
    LEVEL_ENV_VAR,
    PACKAGE_LOGGER,
    configure_logging,
    get_logger,
    resolve_level,
)


@pytest.fixture()
def unconfigured(monkeypatch: pytest.MonkeyPatch) -> Iterator[logging.Logger]:
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (list(pkg_logger.handlers), pkg_logger.level, pkg_logger.propagate)
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)
    pkg_logger.handlers = []
    yield pkg_logger
    pkg_logger.handlers, level, pkg_logger.propagate = saved
    pkg_logger.setLevel(level)


def test_explicit_level_wins_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LEVEL_ENV_VAR, "ERROR")
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(5) == 5
    assert resolve_level() == logging.ERROR


def test_unrecognized_levels_fall_through(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LEVEL_ENV_VAR, "15")
    assert resolve_level("chatty") == 15
    monkeypatch.setenv(LEVEL_ENV_VAR, "loud")
    assert resolve_level(None) == logging.INFO


def test_library_loggers_are_silent_until_configured(unconfigured: logging.Logger) -> None:
    get_logger(f"{PACKAGE_LOGGER}.reconcile")
    assert [type(h) for h in unconfigured.handlers] == [logging.NullHandler]


def test_configure_installs_one_handler_once(
    unconfigured: logging.Logger, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(LEVEL_ENV_VAR, "WARNING")
    get_logger(f"{PACKAGE_LOGGER}.persistence")
    out = io.StringIO()
    configure_logging(stream=out, fmt="%(levelname)s %(name)s %(message)s")
    configure_logging("DEBUG", stream=io.StringIO())

    assert len(unconfigured.handlers) == 1
    assert unconfigured.propagate is False
    assert unconfigured.level == logging.WARNING

    log = get_logger(f"{PACKAGE_LOGGER}.persistence")
    log.info("hidden")
    log.warning("Transaction %s references unknown account %s", "t1", "zzz")
    assert out.getvalue().splitlines() == [
        "WARNING finance_dashboard.persistence Transaction t1 references unknown account zzz"
    ]
