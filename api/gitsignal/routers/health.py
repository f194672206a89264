"""Health and version endpoints.

Health reports the GitHub settings the series endpoints will run with, so a
deployment missing its token shows up before the first rate-limited request.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from gitsignal.services.github_client import configured_base_url, default_max_pages, env_token
from gitsignal.services.week_buckets import horizon_weeks, iso_utc

router = APIRouter()

HEALTH_VERSION = "1.0.0"
SERVICE_STARTED_AT = datetime.now(timezone.utc)


class HealthResponse(BaseModel):
    """GET /api/health response."""

    model_config = ConfigDict(extra="forbid")
    status: str = Field(description="Always 'ok'")
    version: str = Field(description="Semver MAJOR.MINOR.PATCH")
    timestamp: str = Field(description="ISO8601 UTC")
    started_at: str = Field(description="ISO8601 UTC when service process started")
    uptime_seconds: int = Field(ge=0)
    github_api_url: str
    github_token_configured: bool = Field(
        description="False means unauthenticated requests and GitHub's low anonymous rate limit"
    )
    max_pages: int = Field(description="Page ceiling for paginated GitHub listings")
    horizon_weeks: int = Field(description="Recency window of the issue series")


@router.get("/version")
async def version():
    return {"version": HEALTH_VERSION}


@router.get("/health", response_model=HealthResponse)
async def health():
    now = datetime.now(timezone.utc)
    return HealthResponse(
        status="ok",
        version=HEALTH_VERSION,
        timestamp=iso_utc(now),
        started_at=iso_utc(SERVICE_STARTED_AT),
        uptime_seconds=max(0, int((now - SERVICE_STARTED_AT).total_seconds())),
        github_api_url=configured_base_url(),
        github_token_configured=env_token() is not None,
        max_pages=default_max_pages(),
        horizon_weeks=horizon_weeks(),
    )
