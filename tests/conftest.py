"""Pytest configuration for test isolation.

The CLI loads ``.env`` from the current working directory and reads its
settings from the environment, and logging is configured once per process.
Either can leak between tests (a developer's real ``NOTION_TOKEN`` would even
make a test talk to the real API), so every test gets a clean environment, a
fresh working directory, and unconfigured logging.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from ledger_sync.logging_setup import reset_logging

_ISOLATED_ENV = (
    "NOTION_TOKEN",
    "NOTION_DATABASE_ID",
    "LEDGER_SYNC_TIMEZONE",
    "LEDGER_SYNC_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear settings from the environment and run from an empty directory."""

    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir(parents=True, exist_ok=True)
    monkeypatch.chdir(workdir)
    yield
    reset_logging()
