"""Integration test fixtures: a fake GitHub API behind httpx.MockTransport."""

import json

import httpx
import pytest

from github_portfolio.fetcher import DataFetcher
from github_portfolio.rate_limit import RateLimitGate
from github_portfolio.settings import Settings

NOW = 1_700_000_000.0
RESET = NOW + 1800


def quota_headers(remaining=59, limit=60, reset=RESET):
    return {
        "x-ratelimit-remaining": str(remaining),
        "x-ratelimit-limit": str(limit),
        "x-ratelimit-reset": str(int(reset)),
    }


def user_payload(login, **overrides):
    payload = {
        "login": login,
        "name": login.title(),
        "avatar_url": f"https://avatars.example/{login}",
        "html_url": f"https://github.com/{login}",
        "bio": None,
        "location": None,
        "blog": "",
        "twitter_username": None,
        "followers": 3,
        "following": 1,
        "public_repos": 2,
    }
    payload.update(overrides)
    return payload


def repo_payload(owner, name, stars=0, **overrides):
    payload = {
        "id": abs(hash((owner, name))) % 100_000,
        "name": name,
        "full_name": f"{owner}/{name}",
        "description": None,
        "html_url": f"https://github.com/{owner}/{name}",
        "homepage": None,
        "language": None,
        "stargazers_count": stars,
        "forks_count": 0,
        "fork": False,
        "updated_at": "2024-01-01T00:00:00Z",
    }
    payload.update(overrides)
    return payload


class FakeGitHub:
    """In-memory GitHub API. Routes are keyed by URL path.

    A route value is either a (status, body) tuple, where dict/list bodies are
    JSON-encoded and str bodies sent raw, or an async callable returning an
    httpx.Response.
    """

    def __init__(self):
        self.routes = {}
        self.requests: list[httpx.Request] = []
        self.headers = quota_headers()

    def add(self, path, status=200, body=None, headers=None):
        self.routes[path] = (status, body, headers)

    def add_user(self, login, repos=(), readmes=None, **profile):
        self.add(f"/users/{login}", body=user_payload(login, **profile))
        self.add(f"/users/{login}/repos", body=list(repos))
        for full_name, text in (readmes or {}).items():
            self.add(f"/repos/{full_name}/readme", body=text)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"}, headers=self.headers)
        if callable(route):
            return await route(request)
        status, body, headers = route
        headers = headers if headers is not None else self.headers
        if isinstance(body, (dict, list)):
            return httpx.Response(status, content=json.dumps(body).encode(), headers={
                **headers, "content-type": "application/json",
            })
        return httpx.Response(status, text=body or "", headers=headers)

    def paths(self):
        return [r.url.path for r in self.requests]


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def settings():
    return Settings(
        github_token=None,
        github_api_base="https://api.github.com",
        tick_interval=0.01,
        rate_limit_poll_interval=60,
    )


@pytest.fixture
def clock():
    now = [NOW]

    def _clock():
        return now[0]

    _clock.now = now
    return _clock


@pytest.fixture
def http_client(github):
    return httpx.AsyncClient(
        base_url="https://api.github.com",
        transport=httpx.MockTransport(github.handler),
    )


@pytest.fixture
def gate(clock):
    return RateLimitGate(clock=clock)


@pytest.fixture
def fetcher(gate, settings, http_client, clock):
    return DataFetcher(gate, settings=settings, client=http_client, clock=clock)
