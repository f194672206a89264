"""Shared router dependencies: one GitHub client per request, optional pinned clock."""

from __future__ import annotations

from datetime import datetime
from typing import AsyncIterator, Optional

from fastapi import Request

from gitsignal.services.github_client import GitHubClient


async def get_client(request: Request) -> AsyncIterator[GitHubClient]:
    factory = getattr(request.app.state, "github_client_factory", None) or GitHubClient
    async with factory() as client:
        yield client


def get_now(request: Request) -> Optional[datetime]:
    clock = getattr(request.app.state, "clock", None)
    return clock() if clock is not None else None
