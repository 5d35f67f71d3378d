"""Plain-text profile summary and repo ordering for a search result."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Sequence

from .models import Profile, RepoSummary

TOP_LANGUAGES = 3
VISIBLE_REPOS = 3


class RepoSort(str, Enum):
    STARS = "stars"
    UPDATED = "updated"
    FORKS = "forks"

    @property
    def label(self) -> str:
        return {"stars": "Stars", "updated": "Activity", "forks": "Forks"}[self.value]


@dataclass
class Summary:
    lines: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


def parse_timestamp(value: str) -> datetime | None:
    """Parse an API timestamp like 2024-05-01T12:00:00Z."""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date(value: str) -> str:
    """Format as "May 1, 2024", returning the input unchanged if unparseable."""
    dt = parse_timestamp(value)
    if dt is None:
        return value
    return f"{dt:%b} {dt.day}, {dt.year}"


def _updated_key(repo: RepoSummary) -> float:
    dt = parse_timestamp(repo.updated_at)
    return dt.timestamp() if dt else 0.0


def sort_repos(
    repos: Sequence[RepoSummary],
    sort: RepoSort | str = RepoSort.STARS,
    limit: int | None = VISIBLE_REPOS,
) -> list[RepoSummary]:
    """Order repos by stars, latest activity or forks, highest first."""
    sort = RepoSort(sort)
    if sort is RepoSort.STARS:
        key = lambda repo: repo.stargazers_count  # noqa: E731
    elif sort is RepoSort.FORKS:
        key = lambda repo: repo.forks_count  # noqa: E731
    else:
        key = _updated_key
    ranked = sorted(repos, key=key, reverse=True)
    return ranked if limit is None else ranked[:limit]


def top_languages(repos: Sequence[RepoSummary], count: int = TOP_LANGUAGES) -> list[str]:
    counts = Counter(repo.language for repo in repos if repo.language)
    return [lang for lang, _ in counts.most_common(count)]


def build_summary(profile: Profile, repos: Sequence[RepoSummary]) -> Summary:
    summary = Summary()
    languages = top_languages(repos)
    total_stars = sum(repo.stargazers_count for repo in repos)
    total_forks = sum(repo.forks_count for repo in repos)
    recent = sort_repos(repos, RepoSort.UPDATED, limit=1)

    name = profile.name or profile.login
    summary.lines.append(f"{name} is a GitHub creator with {profile.followers} followers.")
    if repos:
        summary.lines.append(
            f"Public repos shown: {len(repos)}, with {total_stars} total stars and {total_forks} forks."
        )
    if languages:
        summary.lines.append(f"Most common languages: {', '.join(languages)}.")
    if recent:
        summary.lines.append(
            f"Latest update: {recent[0].name} on {format_date(recent[0].updated_at)}."
        )
    if profile.bio:
        summary.lines.append(f'Bio signal: "{profile.bio}".')

    if not profile.bio:
        summary.suggestions.append("Add a short bio to clarify focus.")
    if not profile.blog:
        summary.suggestions.append("Add a website or portfolio link.")
    if total_stars < 5 and len(repos) > 3:
        summary.suggestions.append("Pin or showcase one standout project to drive attention.")
    if len(languages) > 1:
        summary.suggestions.append("Consider a spotlight repo per language to show breadth.")
    return summary


def normalize_url(value: str | None) -> str | None:
    if not value:
        return None
    if value.startswith(("http://", "https://")):
        return value
    return f"https://{value}"


def profile_links(profile: Profile) -> list[tuple[str, str]]:
    """(label, href) pairs for the profile's GitHub page, website and Twitter."""
    links = []
    if profile.html_url:
        links.append(("GitHub", profile.html_url))
    blog = normalize_url(profile.blog)
    if blog:
        links.append(("Website", blog))
    if profile.twitter_username:
        links.append(("Twitter", f"https://twitter.com/{profile.twitter_username}"))
    return links
