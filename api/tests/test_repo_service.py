"""Repository input parsing, colors and repo info mapping."""

import pytest
import respx
from httpx import Response

from gitsignal.services.github_client import GitHubClient, NotFoundError
from gitsignal.services.repo_service import (
    REPO_COLORS,
    fetch_repo_info,
    parse_repo_input,
    parse_repo_list,
    repo_color,
)


@pytest.mark.parametrize(
    "text",
    [
        "facebook/react",
        "  facebook/react  ",
        "https://github.com/facebook/react",
        "http://www.github.com/facebook/react",
        "github.com/facebook/react.git",
        "https://github.com/facebook/react/issues/123",
        "HTTPS://GitHub.com/facebook/react",
    ],
)
def test_parse_repo_input_accepts_urls_and_short_form(text):
    parsed = parse_repo_input(text)
    assert parsed is not None
    assert (parsed.owner, parsed.name) == ("facebook", "react")


@pytest.mark.parametrize("text", ["", "react", "a/b/c", "https://gitlab.com/a/b/c"])
def test_parse_repo_input_rejects_other_input(text):
    assert parse_repo_input(text) is None


def test_parse_repo_list():
    parsed = parse_repo_list("a/one, https://github.com/b/two ,")
    assert [(p.owner, p.name) for p in parsed] == [("a", "one"), ("b", "two")]
    with pytest.raises(ValueError):
        parse_repo_list("a/one,nope")


def test_repo_color_cycles():
    assert repo_color(0) == REPO_COLORS[0]
    assert repo_color(len(REPO_COLORS)) == REPO_COLORS[0]
    assert repo_color(len(REPO_COLORS) + 2) == REPO_COLORS[2]


@pytest.mark.asyncio
@respx.mock
async def test_fetch_repo_info_maps_fields():
    respx.get("https://api.github.com/repos/psf/requests").mock(
        return_value=Response(
            200,
            json={
                "name": "requests",
                "full_name": "psf/requests",
                "owner": {"login": "psf"},
                "description": None,
                "stargazers_count": 50000,
                "forks_count": 9000,
                "open_issues_count": 200,
                "language": "Python",
                "updated_at": "2026-03-01T00:00:00Z",
            },
        )
    )

    async with GitHubClient() as client:
        info = await fetch_repo_info("psf", "requests", client=client)

    assert info.owner == "psf"
    assert info.full_name == "psf/requests"
    assert info.description is None
    assert info.stars == 50000
    assert info.updated_at == "2026-03-01T00:00:00Z"


@pytest.mark.asyncio
@respx.mock
async def test_fetch_repo_info_not_found():
    respx.get("https://api.github.com/repos/psf/missing").mock(return_value=Response(404, json={}))

    async with GitHubClient() as client:
        with pytest.raises(NotFoundError):
            await fetch_repo_info("psf", "missing", client=client)
