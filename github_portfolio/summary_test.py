"""Unit tests for the profile summary and repo ordering."""

import pytest

from .models import Profile, RepoSummary
from .summary import (
    RepoSort,
    build_summary,
    format_date,
    normalize_url,
    profile_links,
    sort_repos,
    top_languages,
)


def _repo(name, stars=0, forks=0, language=None, updated_at="2024-01-01T00:00:00Z"):
    return RepoSummary(
        id=len(name),
        name=name,
        full_name=f"octo/{name}",
        language=language,
        stargazers_count=stars,
        forks_count=forks,
        updated_at=updated_at,
    )


def describe_format_date():
    def it_formats_api_timestamps():
        assert format_date("2024-05-01T12:30:00Z") == "May 1, 2024"

    def it_returns_unparseable_values_unchanged():
        assert format_date("yesterday") == "yesterday"


def describe_sort_repos():
    @pytest.fixture
    def repos():
        return [
            _repo("old-popular", stars=50, forks=1, updated_at="2020-01-01T00:00:00Z"),
            _repo("new-quiet", stars=1, forks=2, updated_at="2024-06-01T00:00:00Z"),
            _repo("forked", stars=10, forks=30, updated_at="2023-01-01T00:00:00Z"),
            _repo("middle", stars=20, forks=3, updated_at="2022-01-01T00:00:00Z"),
        ]

    def it_sorts_by_stars_and_keeps_three(repos):
        assert [r.name for r in sort_repos(repos)] == ["old-popular", "middle", "forked"]

    def it_sorts_by_activity(repos):
        assert [r.name for r in sort_repos(repos, RepoSort.UPDATED)] == [
            "new-quiet",
            "forked",
            "middle",
        ]

    def it_sorts_by_forks(repos):
        assert [r.name for r in sort_repos(repos, "forks", limit=None)][0] == "forked"

    def it_labels_sorts():
        assert RepoSort.UPDATED.label == "Activity"


def describe_top_languages():
    def it_counts_languages_and_keeps_three():
        repos = [
            _repo("a", language="Python"),
            _repo("b", language="Go"),
            _repo("c", language="Python"),
            _repo("d", language="Rust"),
            _repo("e", language="Go"),
            _repo("f", language="Shell"),
            _repo("g"),
        ]
        assert top_languages(repos) == ["Python", "Go", "Rust"]


def describe_build_summary():
    def it_describes_a_busy_profile():
        profile = Profile(login="octo", name="Octo Cat", followers=12, bio="Builds tools", blog="octo.dev")
        repos = [
            _repo("cli", stars=3, forks=1, language="Go", updated_at="2024-05-01T00:00:00Z"),
            _repo("web", stars=4, forks=0, language="TypeScript", updated_at="2023-01-01T00:00:00Z"),
        ]

        summary = build_summary(profile, repos)

        assert summary.lines == [
            "Octo Cat is a GitHub creator with 12 followers.",
            "Public repos shown: 2, with 7 total stars and 1 forks.",
            "Most common languages: Go, TypeScript.",
            "Latest update: cli on May 1, 2024.",
            'Bio signal: "Builds tools".',
        ]
        assert summary.suggestions == ["Consider a spotlight repo per language to show breadth."]

    def it_suggests_improvements_for_a_sparse_profile():
        profile = Profile(login="octo")
        repos = [_repo(f"r{i}") for i in range(4)]

        summary = build_summary(profile, repos)

        assert summary.lines[0] == "octo is a GitHub creator with 0 followers."
        assert summary.suggestions == [
            "Add a short bio to clarify focus.",
            "Add a website or portfolio link.",
            "Pin or showcase one standout project to drive attention.",
        ]

    def it_handles_no_repos():
        summary = build_summary(Profile(login="octo"), [])
        assert summary.lines == ["octo is a GitHub creator with 0 followers."]


def describe_profile_links():
    def it_normalizes_blog_and_adds_twitter():
        profile = Profile(
            login="octo",
            html_url="https://github.com/octo",
            blog="octo.dev",
            twitter_username="octo",
        )
        assert profile_links(profile) == [
            ("GitHub", "https://github.com/octo"),
            ("Website", "https://octo.dev"),
            ("Twitter", "https://twitter.com/octo"),
        ]

    def it_keeps_explicit_schemes():
        assert normalize_url("http://example.com") == "http://example.com"
        assert normalize_url("") is None
