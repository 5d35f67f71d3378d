"""Build the searchable knowledge base from a user's repositories.

One README fetch per candidate repo, all issued concurrently. The assembled
result keeps candidate order regardless of which fetch finishes first.
"""

import asyncio
import logging
from enum import Enum
from typing import Iterable, Sequence

from .fetcher import DataFetcher
from .keywords import extract_keywords
from .models import (
    MAX_README_KEYWORDS,
    MAX_SKILLS,
    SHALLOW_SCAN_LIMIT,
    KnowledgeBase,
    KnowledgeBaseRepo,
    RepoSummary,
)
from .results import FetchResult, NotFound, Ok, RateLimited

logger = logging.getLogger(__name__)


class ScanDepth(str, Enum):
    FULL = "full"
    SHALLOW = "shallow"


def select_candidates(
    repos: Sequence[RepoSummary], mode: ScanDepth | str = ScanDepth.FULL
) -> list[RepoSummary]:
    """Pick the repos to scan.

    Full scans everything in input order. Shallow keeps the top
    SHALLOW_SCAN_LIMIT by stars, ties broken by input order.
    """
    mode = ScanDepth(mode)
    if mode is ScanDepth.FULL:
        return list(repos)
    # sorted() is stable, so equal star counts keep their input order
    ranked = sorted(repos, key=lambda repo: repo.stargazers_count, reverse=True)
    return ranked[:SHALLOW_SCAN_LIMIT]


def aggregate_skills(repos: Iterable[KnowledgeBaseRepo]) -> list[str]:
    """Union of languages and keywords in repo order, capped at MAX_SKILLS."""
    skills: dict[str, None] = {}
    for repo in repos:
        if repo.language:
            skills.setdefault(repo.language, None)
        for keyword in extract_keywords(repo.description):
            skills.setdefault(keyword, None)
        for keyword in extract_keywords(repo.readme)[:MAX_README_KEYWORDS]:
            skills.setdefault(keyword, None)
    return list(skills)[:MAX_SKILLS]


def _readme_or_none(repo: RepoSummary, result: FetchResult) -> str | None:
    if isinstance(result, Ok):
        return result.value
    if not isinstance(result, NotFound):
        # A failed README degrades to "no README" for this repo only
        logger.debug("README for %s unavailable: %s", repo.full_name, result)
    return None


async def build_knowledge_base(
    fetcher: DataFetcher, username: str, repos: Sequence[RepoSummary]
) -> KnowledgeBase | RateLimited:
    """Fetch every README concurrently and index the results.

    Returns the first RateLimited outcome instead of a partial knowledge base
    when any fetch hit the quota.
    """
    results = await asyncio.gather(*(fetcher.get_readme_text(repo.full_name) for repo in repos))

    for result in results:
        if isinstance(result, RateLimited):
            logger.info("Knowledge base build for %s abandoned: rate limited", username)
            return result

    kb_repos = tuple(
        KnowledgeBaseRepo(
            name=repo.name,
            description=repo.description,
            readme=_readme_or_none(repo, result),
            language=repo.language,
        )
        for repo, result in zip(repos, results)
    )
    return KnowledgeBase(
        username=username,
        skills=tuple(aggregate_skills(kb_repos)),
        repos=kb_repos,
    )


class KnowledgeBaseBuilder:
    """Publishes knowledge bases, keeping only the latest started build.

    Every rebuild takes a generation number. A build that completes after a
    newer one was started (or after invalidate()) is discarded.
    """

    def __init__(self, fetcher: DataFetcher):
        self._fetcher = fetcher
        self._generation = 0
        self.current: KnowledgeBase | None = None
        self.loading = False

    def invalidate(self) -> None:
        """Drop the current knowledge base and orphan any build in flight."""
        self._generation += 1
        self.current = None
        self.loading = False

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def begin(self) -> int:
        """Claim the next generation; every earlier build becomes stale."""
        self._generation += 1
        self.loading = True
        return self._generation

    async def rebuild(
        self,
        username: str,
        repos: Sequence[RepoSummary],
        mode: ScanDepth | str = ScanDepth.FULL,
        generation: int | None = None,
    ) -> KnowledgeBase | RateLimited | None:
        """Build for the given candidates and publish if still the latest build.

        Pass a generation from begin() when the build is scheduled before it
        starts running. Returns the published KnowledgeBase, the RateLimited
        outcome that aborted the build, or None when the build was superseded.
        """
        if generation is None:
            generation = self.begin()
        candidates = select_candidates(repos, mode)
        logger.info(
            "Building knowledge base for %s: %d of %d repos (%s)",
            username, len(candidates), len(repos), ScanDepth(mode).value,
        )
        try:
            result = await build_knowledge_base(self._fetcher, username, candidates)
        finally:
            if self.is_current(generation):
                self.loading = False

        if not self.is_current(generation):
            logger.info("Discarding superseded knowledge base build for %s", username)
            return None
        if isinstance(result, KnowledgeBase):
            self.current = result
            logger.info("Knowledge base for %s: %d skills", username, len(result.skills))
        return result
