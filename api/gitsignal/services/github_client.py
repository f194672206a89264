"""GitHub API client for the weekly series engine.

Async REST wrapper with:
- optional token auth (GITHUB_TOKEN / GH_TOKEN)
- sequential page walking with a page ceiling
- status mapping to NotFound / RateLimited / StatsComputing / TransientFetch errors

Nothing is retried here: rate limiting and stats-not-ready are surfaced to the caller.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_PER_PAGE = 100
DEFAULT_MAX_PAGES = 10
DEFAULT_TIMEOUT_SECONDS = 20.0
STAR_MEDIA_TYPE = "application/vnd.github.star+json"


class GitHubFetchError(RuntimeError):
    """Base for every failure surfaced by the client."""

    def __init__(self, message: str, *, status_code: int | None = None, url: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class NotFoundError(GitHubFetchError):
    pass


class RateLimitedError(GitHubFetchError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
        reset_at: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, url=url)
        self.reset_at = reset_at


class StatsComputingError(GitHubFetchError):
    """GitHub is still materializing a /stats/* aggregate; poll again later."""


class TransientFetchError(GitHubFetchError):
    pass


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return max(minimum, int(raw))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return max(1.0, float(raw))
    except ValueError:
        return default


def default_max_pages() -> int:
    return _env_int("GITSIGNAL_MAX_PAGES", DEFAULT_MAX_PAGES)


def env_token() -> str | None:
    """GITHUB_TOKEN, else GH_TOKEN; blank values count as unset."""
    for name in ("GITHUB_TOKEN", "GH_TOKEN"):
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return None


def configured_base_url() -> str:
    return (os.getenv("GITHUB_API_URL") or DEFAULT_BASE_URL).rstrip("/")


def _rate_limit_reset(r: httpx.Response) -> int | None:
    reset = r.headers.get("X-RateLimit-Reset")
    if reset is None:
        return None
    try:
        return int(reset)
    except ValueError:
        return None


class GitHubClient:
    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        user_agent: str = "gitsignal/1.0",
        timeout: Optional[float] = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token or env_token()
        self._base_url = base_url.rstrip("/") if base_url else configured_base_url()
        self._timeout = timeout if timeout is not None else _env_float(
            "GITHUB_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS
        )
        self._transport = transport
        self._headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            self._headers["Authorization"] = f"Bearer {self._token}"
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "GitHubClient":
        self._http()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=self._headers,
                transport=self._transport,
            )
        return self._client

    def _url(self, path: str) -> str:
        return path if path.startswith("http") else f"{self._base_url}{path}"

    async def _request(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        log.debug("github_request url=%s params=%s", url, params)
        try:
            return await self._http().get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            log.warning("github_transport_error url=%s error=%s", url, exc)
            raise TransientFetchError(f"GitHub request failed for {url}: {exc}", url=url) from exc

    def _raise_for_status(self, r: httpx.Response, url: str, *, stats: bool = False) -> None:
        status = r.status_code
        if status == 202:
            if stats:
                raise StatsComputingError("Stats are being computed", status_code=status, url=url)
            raise TransientFetchError(f"Unexpected 202 Accepted for {url}", status_code=status, url=url)
        if 200 <= status < 300:
            return
        log.warning("github_error status=%s url=%s", status, url)
        if status == 404:
            raise NotFoundError(f"Resource not found: {url}", status_code=status, url=url)
        if status in (403, 429):
            raise RateLimitedError(
                "GitHub API rate limit exceeded. Try again later.",
                status_code=status,
                url=url,
                reset_at=_rate_limit_reset(r),
            )
        raise TransientFetchError(
            f"GitHub API error {status} for {url}: {r.text[:200]}", status_code=status, url=url
        )

    @staticmethod
    def _json(r: httpx.Response, url: str) -> Any:
        try:
            return r.json()
        except ValueError as exc:
            raise TransientFetchError(
                f"GitHub response for {url} was not JSON", status_code=r.status_code, url=url
            ) from exc

    async def get_json(self, path: str) -> Any:
        """GET one JSON document for a path or full URL."""
        url = self._url(path)
        r = await self._request(url)
        self._raise_for_status(r, url)
        return self._json(r, url)

    async def get_stats(self, path: str) -> list[Any]:
        """GET a /stats/* endpoint. 202 or an empty body means GitHub is still computing it.

        204 No Content is how GitHub answers for a repository without commits.
        """
        url = self._url(path)
        r = await self._request(url)
        self._raise_for_status(r, url, stats=True)
        if r.status_code == 204:
            return []
        data = self._json(r, url)
        if not isinstance(data, list) or not data:
            raise StatsComputingError("Stats are being computed", status_code=r.status_code, url=url)
        return data

    async def paginate(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
        per_page: int = DEFAULT_PER_PAGE,
        accept: str | None = None,
    ) -> list[Any]:
        """Walk pages 1..max_pages in order and return every item.

        Stops early on an empty page or a short page (fewer than per_page items).
        Any failing page raises; items from earlier pages are discarded with it.
        """
        url = self._url(path)
        limit = max_pages if max_pages is not None else default_max_pages()
        headers = {"Accept": accept} if accept else None
        out: list[Any] = []
        for page in range(1, limit + 1):
            query = dict(params or {})
            query["per_page"] = per_page
            query["page"] = page
            r = await self._request(url, params=query, headers=headers)
            self._raise_for_status(r, url)
            data = self._json(r, url)
            if not isinstance(data, list):
                raise TransientFetchError(
                    f"Expected a list page from {url}, got {type(data).__name__}",
                    status_code=r.status_code,
                    url=url,
                )
            if not data:
                break
            out.extend(data)
            if len(data) < per_page:
                break
        log.debug("github_paginate url=%s items=%s", url, len(out))
        return out

    async def get_repo(self, owner: str, repo: str) -> dict:
        data = await self.get_json(f"/repos/{owner}/{repo}")
        if not isinstance(data, dict):
            raise TransientFetchError(f"Unexpected repository payload for {owner}/{repo}")
        return data

    async def list_stargazers(self, owner: str, repo: str, max_pages: int | None = None) -> list[Any]:
        return await self.paginate(
            f"/repos/{owner}/{repo}/stargazers",
            max_pages=max_pages,
            accept=STAR_MEDIA_TYPE,
        )

    async def list_issues(
        self,
        owner: str,
        repo: str,
        *,
        state: str,
        since_iso_utc: str,
        sort: str,
        direction: str = "desc",
        max_pages: int | None = None,
    ) -> list[Any]:
        """List issues (and pull requests, which GitHub mixes in) updated since an ISO-8601 UTC timestamp."""
        return await self.paginate(
            f"/repos/{owner}/{repo}/issues",
            params={"state": state, "since": since_iso_utc, "sort": sort, "direction": direction},
            max_pages=max_pages,
        )

    async def commit_activity(self, owner: str, repo: str) -> list[Any]:
        return await self.get_stats(f"/repos/{owner}/{repo}/stats/commit_activity")

    async def contributor_stats(self, owner: str, repo: str) -> list[Any]:
        return await self.get_stats(f"/repos/{owner}/{repo}/stats/contributors")
