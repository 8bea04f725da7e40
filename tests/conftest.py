"""Pytest configuration for test isolation.

Source trees are put on ``sys.path`` so tests run from a plain checkout
(``packages/`` for ``finance_dashboard``, ``libs/db/src`` for ``db``).

The database client keeps a process-wide engine bound to the first URL it
sees. Each test gets its own SQLite file, so the shared engine is disposed
around every test via an autouse fixture.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [
    p
    for p in [str(_ROOT / "packages"), str(_ROOT / "libs" / "db" / "src"), str(_ROOT)]
    if p not in sys.path
]

from db.client import dispose_engine  # noqa: E402

from tests.helpers.db import bootstrap_sqlite_db  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_engine(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test without a bound engine or ambient DATABASE_URL."""

    monkeypatch.delenv("DATABASE_URL", raising=False)
    dispose_engine()
    yield
    dispose_engine()


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    """URL of a freshly created SQLite database with the dashboard schema."""

    return bootstrap_sqlite_db(tmp_path / "dashboard.sqlite3")
