"""Async GitHub REST client using httpx.

Each call performs exactly one request and normalizes the outcome into a
FetchResult. Quota headers on every response are fed to the RateLimitGate.
No retries happen here; the caller decides what to do with a failure.
"""

import logging
import time
from typing import Any, Callable
from urllib.parse import quote

import httpx

from .models import Profile, RateLimitStatus, RepoSummary
from .rate_limit import RateLimitGate
from .results import DEFAULT_ERROR_MESSAGE, FetchResult, NotFound, Ok, RateLimited, RemoteError
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/vnd.github+json"
RAW_MEDIA_TYPE = "application/vnd.github.v3.raw"
HTML_MEDIA_TYPE = "application/vnd.github.v3.html"
USER_AGENT = "github-portfolio/0.1"

REPOS_PER_PAGE = 100


def _header_int(resp: httpx.Response, name: str) -> int | None:
    val = resp.headers.get(name)
    if val is None:
        return None
    try:
        return int(val)
    except ValueError:
        return None


def _json_body(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return None


def _body_message(body: Any) -> str:
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return ""


def _map(result: FetchResult, convert: Callable[[Any], Any]) -> FetchResult:
    """Apply convert to an Ok payload, passing other outcomes through."""
    if not isinstance(result, Ok):
        return result
    try:
        return Ok(convert(result.value))
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Unexpected payload shape: %r", e)
        return RemoteError(DEFAULT_ERROR_MESSAGE)


def _core_status(body: Any) -> RateLimitStatus:
    core = body["resources"]["core"]
    return RateLimitStatus(
        remaining=int(core["remaining"]),
        limit=int(core["limit"]),
        reset_at=float(core["reset"]),
    )


class DataFetcher:
    """Thin async client for the public GitHub REST endpoints."""

    def __init__(
        self,
        gate: RateLimitGate,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.gate = gate
        self._settings = settings or get_settings()
        self._clock = clock
        self._owns_client = client is None
        if client is None:
            headers = {"Accept": JSON_MEDIA_TYPE, "User-Agent": USER_AGENT}
            if self._settings.github_token:
                headers["Authorization"] = f"bearer {self._settings.github_token}"
            client = httpx.AsyncClient(
                base_url=self._settings.github_api_base,
                headers=headers,
                timeout=self._settings.request_timeout,
            )
        self._client = client

    async def __aenter__(self) -> "DataFetcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(
        self, path: str, params: dict | None, accept: str | None
    ) -> httpx.Response | RemoteError:
        headers = {"Accept": accept} if accept else None
        try:
            return await self._client.get(path, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("GET %s failed: %s: %s", path, type(e).__name__, e)
            return RemoteError(DEFAULT_ERROR_MESSAGE)

    def _check_rate_limit(self, resp: httpx.Response, message: str) -> RateLimited | None:
        """Observe quota headers; return RateLimited if the response signals exhaustion."""
        remaining = _header_int(resp, "x-ratelimit-remaining")
        reset = _header_int(resp, "x-ratelimit-reset")
        if remaining is not None and reset is not None:
            limit = _header_int(resp, "x-ratelimit-limit")
            if limit is None:
                limit = self.gate.status.limit if self.gate.status else remaining
            self.gate.observe(remaining, limit, float(reset))

        if resp.status_code in (403, 429) and (
            remaining == 0 or "rate limit" in message.lower()
        ):
            if reset is not None:
                reset_at = float(reset)
            else:
                reset_at = self._clock() + self._settings.rate_limit_fallback_wait
            self.gate.block_until(reset_at)
            return RateLimited(reset_at)
        return None

    async def fetch_record(
        self,
        path: str,
        params: dict | None = None,
        allow_not_found: bool = False,
        accept: str | None = None,
    ) -> FetchResult:
        """GET a JSON resource.

        Args:
            path: API path, e.g. "/users/octocat", or an absolute URL
            params: Query parameters dict
            allow_not_found: Return NotFound instead of RemoteError on 404
            accept: Override the Accept header

        Returns:
            Ok(parsed body), NotFound, RateLimited or RemoteError.
        """
        resp = await self._get(path, params, accept)
        if isinstance(resp, RemoteError):
            return resp

        body = _json_body(resp)
        message = _body_message(body)
        limited = self._check_rate_limit(resp, message)
        if limited is not None:
            return limited

        if resp.is_success:
            if body is None:
                return RemoteError(DEFAULT_ERROR_MESSAGE)
            return Ok(body)
        if allow_not_found and resp.status_code == 404:
            return NotFound()
        logger.debug("GET %s -> %s %s", path, resp.status_code, message)
        return RemoteError(message or DEFAULT_ERROR_MESSAGE)

    async def fetch_text(
        self,
        path: str,
        params: dict | None = None,
        allow_not_found: bool = False,
        accept: str | None = RAW_MEDIA_TYPE,
    ) -> FetchResult:
        """GET a resource as raw text. Same contract as fetch_record."""
        resp = await self._get(path, params, accept)
        if isinstance(resp, RemoteError):
            return resp

        message = "" if resp.is_success else _body_message(_json_body(resp))
        limited = self._check_rate_limit(resp, message)
        if limited is not None:
            return limited

        if resp.is_success:
            return Ok(resp.text)
        if allow_not_found and resp.status_code == 404:
            return NotFound()
        logger.debug("GET %s -> %s %s", path, resp.status_code, message)
        return RemoteError(message or DEFAULT_ERROR_MESSAGE)

    async def get_profile(self, handle: str) -> FetchResult:
        result = await self.fetch_record(f"/users/{quote(handle, safe='')}", allow_not_found=True)
        return _map(result, Profile.from_api)

    async def get_repos(self, handle: str) -> FetchResult:
        result = await self.fetch_record(
            f"/users/{quote(handle, safe='')}/repos",
            params={"per_page": REPOS_PER_PAGE, "sort": "updated"},
        )
        return _map(result, lambda items: [RepoSummary.from_api(item) for item in items])

    async def get_readme_text(self, full_name: str) -> FetchResult:
        """Raw README body for "owner/repo"; NotFound when the repo has none."""
        return await self.fetch_text(
            f"/repos/{full_name}/readme", allow_not_found=True, accept=RAW_MEDIA_TYPE
        )

    async def get_readme_html(self, full_name: str) -> FetchResult:
        """Rendered README HTML for "owner/repo"; NotFound when the repo has none."""
        return await self.fetch_text(
            f"/repos/{full_name}/readme", allow_not_found=True, accept=HTML_MEDIA_TYPE
        )

    async def get_rate_limit(self) -> FetchResult:
        """Poll /rate_limit and feed the core quota to the gate.

        Returns Ok(RateLimitStatus) on success.
        """
        result = _map(await self.fetch_record("/rate_limit"), _core_status)
        if isinstance(result, Ok):
            status = result.value
            self.gate.observe(status.remaining, status.limit, status.reset_at)
        return result
