"""Pytest configuration and fixtures."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _isolate_env_and_app_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    # No developer token or API override may leak into tests, and a pinned clock
    # or client factory must not leak between tests through app.state.
    for key in (
        "GITHUB_TOKEN",
        "GH_TOKEN",
        "GITHUB_API_URL",
        "GITHUB_TIMEOUT_SECONDS",
        "GITSIGNAL_MAX_PAGES",
        "GITSIGNAL_HORIZON_WEEKS",
    ):
        monkeypatch.delenv(key, raising=False)

    from gitsignal.main import app

    app.state.github_client_factory = None
    app.state.clock = None
    yield
    app.state.github_client_factory = None
    app.state.clock = None
