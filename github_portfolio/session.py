"""One interactive portfolio session: search, knowledge base, chat and timers.

A session owns the rate limit gate, the fetcher, the knowledge base builder
and two periodic tasks (the countdown tick and the quota poll). All state is
touched from a single event loop.
"""

import asyncio
import logging
import time
import uuid
from datetime import datetime
from typing import Callable

from .fetcher import DataFetcher
from .knowledge_base import KnowledgeBaseBuilder, ScanDepth
from .matcher import respond
from .models import ChatMessage, KnowledgeBase, Portfolio, RateLimitStatus
from .rate_limit import GateState, RateLimitGate
from .results import DEFAULT_ERROR_MESSAGE, FetchResult, NotFound, Ok, RateLimited, RemoteError
from .settings import Settings, get_settings
from .timers import PeriodicTask

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = ChatMessage(
    id="welcome",
    role="bot",
    content="Recruiter bot online. Ask me about skills, tools, or specific repositories.",
)


class PortfolioSession:
    """Search-by-handle workflow with a stale-result guard on every async step.

    Use as an async context manager so the timers and any pending builds are
    stopped when the session ends.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        fetcher: DataFetcher | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._settings = settings or get_settings()
        self._clock = clock
        self._owns_fetcher = fetcher is None
        if fetcher is None:
            fetcher = DataFetcher(RateLimitGate(clock), settings=self._settings, clock=clock)
        self.fetcher = fetcher
        self.gate = fetcher.gate
        self.builder = KnowledgeBaseBuilder(fetcher)

        self.portfolio: Portfolio | None = None
        self.error: str | None = None
        self.loading = False
        self.last_searched: str | None = None
        self.messages: list[ChatMessage] = [WELCOME_MESSAGE]
        self.deep_scan = True
        self.now = clock()

        self._search_id = 0
        self._build_task: asyncio.Task | None = None
        self._pending_builds: set[asyncio.Task] = set()
        self._ticker = PeriodicTask("rate-limit-tick", self._settings.tick_interval, self._tick)
        self._poller = PeriodicTask(
            "rate-limit-poll", self._settings.rate_limit_poll_interval, self._poll
        )

    async def __aenter__(self) -> "PortfolioSession":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()

    @property
    def knowledge_base(self) -> KnowledgeBase | None:
        return self.builder.current

    @property
    def kb_loading(self) -> bool:
        return self.builder.loading

    @property
    def rate_limited(self) -> bool:
        return self.gate.is_limited(self._clock())

    def start(self) -> None:
        """Start the countdown tick and the quota poll."""
        self._ticker.start()
        self._poller.start()

    async def stop(self) -> None:
        """Stop the timers, cancel pending builds and close an owned fetcher."""
        await self._ticker.stop()
        await self._poller.stop()
        pending = list(self._pending_builds)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        self._build_task = None
        if self._owns_fetcher:
            await self.fetcher.aclose()

    async def _tick(self) -> None:
        """Refresh the clock shown in countdowns; only a Limited gate needs a tick."""
        self.now = self._clock()
        if self.gate.state is GateState.LIMITED:
            self.gate.tick(self.now)

    async def _poll(self) -> None:
        await self.poll_rate_limit()

    async def poll_rate_limit(self) -> RateLimitStatus | None:
        """Refresh the gate from /rate_limit. Failures are ignored."""
        result = await self.fetcher.get_rate_limit()
        if isinstance(result, Ok):
            return result.value
        logger.debug("Rate limit poll failed: %s", result)
        return None

    def _reset(self, handle: str, deep_scan: bool) -> None:
        self.loading = True
        self.error = None
        self.portfolio = None
        self.last_searched = handle
        self.builder.invalidate()
        self._build_task = None
        self.messages = [WELCOME_MESSAGE]
        self.deep_scan = deep_scan

    def _surface(self, result: FetchResult) -> None:
        if isinstance(result, RateLimited):
            reset_time = datetime.fromtimestamp(result.reset_at).strftime("%H:%M:%S")
            self.error = f"{result.message} Please try again after {reset_time}."
        elif isinstance(result, RemoteError):
            self.error = result.message
        else:
            self.error = DEFAULT_ERROR_MESSAGE

    async def search(self, handle: str, deep_scan: bool = True) -> Portfolio | None:
        """Load a profile and its repos, then start a knowledge base build.

        Refused without any request while the gate is limited. Returns the
        portfolio, or None with `error` set. A search superseded by a newer
        one returns None and leaves the newer search's state alone.
        """
        if self.rate_limited:
            self.error = f"Rate limit reached. Try again in {self.gate.countdown(self._clock())}."
            return None
        handle = handle.strip()
        if not handle:
            return None

        self._search_id += 1
        search_id = self._search_id
        self._reset(handle, deep_scan)
        try:
            result = await self._load_portfolio(handle, search_id)
        finally:
            if search_id == self._search_id:
                self.loading = False

        if search_id != self._search_id:
            logger.info("Discarding superseded search for %s", handle)
            return None
        if not isinstance(result, Portfolio):
            return None

        self.portfolio = result
        self._schedule_build()
        return result

    async def _load_portfolio(self, handle: str, search_id: int) -> Portfolio | None:
        profile = await self.fetcher.get_profile(handle)
        if search_id != self._search_id:
            return None
        if isinstance(profile, NotFound):
            self.error = f'No GitHub user found for "{handle}".'
            return None
        if not isinstance(profile, Ok):
            self._surface(profile)
            return None

        repos = await self.fetcher.get_repos(handle)
        if search_id != self._search_id:
            return None
        if not isinstance(repos, Ok):
            self._surface(repos)
            return None

        readme = await self.fetcher.get_readme_html(f"{handle}/{handle}")
        if search_id != self._search_id:
            return None
        if isinstance(readme, Ok):
            readme_html = readme.value
        elif isinstance(readme, NotFound):
            readme_html = None
        else:
            self._surface(readme)
            return None

        non_forks = [repo for repo in repos.value if not repo.fork]
        return Portfolio(
            profile=profile.value,
            readme_html=readme_html,
            repos=non_forks or repos.value,
        )

    def _schedule_build(self) -> asyncio.Task:
        portfolio = self.portfolio
        mode = ScanDepth.FULL if self.deep_scan else ScanDepth.SHALLOW
        generation = self.builder.begin()
        task = asyncio.get_running_loop().create_task(
            self.builder.rebuild(
                portfolio.profile.login, portfolio.repos, mode, generation=generation
            )
        )
        self._pending_builds.add(task)
        task.add_done_callback(self._pending_builds.discard)
        self._build_task = task
        return task

    def set_deep_scan(self, enabled: bool) -> asyncio.Task | None:
        """Switch scan depth; rebuilds the knowledge base when it changes.

        Must be called from the session's event loop.
        """
        if enabled == self.deep_scan:
            return None
        self.deep_scan = enabled
        if self.portfolio is None:
            return None
        return self._schedule_build()

    async def wait_for_knowledge_base(self) -> KnowledgeBase | None:
        """Wait for the latest scheduled build, following any that replace it."""
        while self._build_task is not None:
            task = self._build_task
            await task
            if task is self._build_task:
                break
        return self.knowledge_base

    def ask(self, text: str) -> str | None:
        """Answer a chat query and append both sides to the transcript."""
        value = text.strip()
        if not value:
            return None
        message_id = uuid.uuid4().hex
        response = respond(self.knowledge_base, value)
        self.messages.append(ChatMessage(id=message_id, role="user", content=value))
        self.messages.append(ChatMessage(id=f"{message_id}-bot", role="bot", content=response))
        return response
