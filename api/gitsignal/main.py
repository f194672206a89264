from __future__ import annotations

import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gitsignal.routers import health, repos, series
from gitsignal.routers.health import HEALTH_VERSION
from gitsignal.services.github_client import (
    GitHubFetchError,
    NotFoundError,
    RateLimitedError,
    StatsComputingError,
)

# Seconds a client should wait before polling a /stats/* backed series again.
STATS_RETRY_AFTER_SECONDS = 10

app = FastAPI(title="GitSignal Weekly Series API", version=HEALTH_VERSION)
logger = logging.getLogger("gitsignal.api.slow")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
logger.propagate = False
logger.setLevel(logging.INFO)

app.state.github_client_factory = None
app.state.clock = None


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name, "1" if default else "").strip().lower()
    return raw in {"1", "true", "yes", "on"}


def _slow_request_ms_threshold() -> float:
    raw = os.getenv("API_SLOW_REQUEST_MS", "1500").strip()
    try:
        return max(25.0, float(raw))
    except ValueError:
        return 1500.0


def _route_path(request: Request) -> str:
    route = request.scope.get("route")
    route_path = str(getattr(route, "path", "") or "") if route is not None else ""
    return route_path or request.url.path


def _correlation_id(request: Request) -> str:
    for key in ("x-request-id", "x-amzn-trace-id", "cf-ray"):
        value = request.headers.get(key)
        if value:
            return value
    return "none"


def _fetch_error_status(exc: GitHubFetchError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, RateLimitedError):
        return 429
    if isinstance(exc, StatsComputingError):
        return 202
    return 502


# Configure CORS
allowed_origins_str = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000")
allowed_origins = [origin.strip() for origin in allowed_origins_str.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GitHubFetchError)
async def github_fetch_error_handler(request: Request, exc: GitHubFetchError) -> JSONResponse:
    status_code = _fetch_error_status(exc)
    headers: dict[str, str] = {}
    if isinstance(exc, StatsComputingError):
        headers["Retry-After"] = str(STATS_RETRY_AFTER_SECONDS)
    elif isinstance(exc, RateLimitedError) and exc.reset_at:
        headers["Retry-After"] = str(max(0, exc.reset_at - int(time.time())))
    logger.info(
        "github_fetch_error path=%s error=%s upstream_status=%s status=%s",
        request.url.path,
        exc.__class__.__name__,
        exc.status_code,
        status_code,
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)}, headers=headers)


@app.get("/")
async def root():
    """Landing info for service discovery."""
    return {"name": app.title, "version": HEALTH_VERSION, "docs": "/docs", "health": "/api/health"}


app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(repos.router, prefix="/api", tags=["repos"])
app.include_router(series.router, prefix="/api", tags=["series"])


@app.middleware("http")
async def log_slow_requests(request: Request, call_next):
    start = time.perf_counter()
    status_code: int | None = None
    exc_name: str | None = None
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    except Exception as exc:
        status_code = 500
        exc_name = exc.__class__.__name__
        raise
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        if status_code is None:
            status_code = 500
        if elapsed_ms >= _slow_request_ms_threshold() or _env_flag("API_LOG_ALL_REQUESTS") or status_code >= 500:
            logger.warning(
                "slow_api_request method=%s path=%s raw_path=%s status=%s elapsed_ms=%.2f query=%s correlation=%s exception=%s",
                request.method,
                _route_path(request),
                request.url.path,
                status_code,
                elapsed_ms,
                dict(request.query_params),
                _correlation_id(request),
                exc_name or "none",
            )
