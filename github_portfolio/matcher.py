"""Deterministic query matching against a knowledge base.

Repo matches take precedence over skill matches; within each tier results keep
knowledge base order. Nothing here is scored or learned.
"""

from dataclasses import dataclass

from .keywords import extract_keywords
from .models import MAX_REPO_MATCHES, MAX_SKILL_MATCHES, KnowledgeBase, KnowledgeBaseRepo

LOADING_RESPONSE = "Knowledge base is still loading. Try again in a moment."
EMPTY_QUERY_RESPONSE = "Ask about specific skills, tools, or repo topics."
NO_SIGNAL_RESPONSE = (
    "No strong signals yet. Try asking about a specific language, framework, or repo name."
)


@dataclass(frozen=True)
class QueryMatch:
    keywords: tuple[str, ...]
    repos: tuple[KnowledgeBaseRepo, ...]
    skills: tuple[str, ...]


def _haystack(repo: KnowledgeBaseRepo) -> str:
    return f"{repo.name} {repo.description or ''} {repo.readme or ''}".lower()


def match(kb: KnowledgeBase, query: str) -> QueryMatch:
    """Collect repo and skill matches for a query, capped per tier."""
    lowered = query.lower()
    keywords = tuple(extract_keywords(lowered))
    if not keywords:
        return QueryMatch(keywords=(), repos=(), skills=())

    repos = []
    for repo in kb.repos:
        haystack = _haystack(repo)
        if any(keyword in haystack for keyword in keywords):
            repos.append(repo)
    # Skills match on literal containment in the whole query, not on tokens
    skills = [skill for skill in kb.skills if skill.lower() in lowered]
    return QueryMatch(
        keywords=keywords,
        repos=tuple(repos[:MAX_REPO_MATCHES]),
        skills=tuple(skills[:MAX_SKILL_MATCHES]),
    )


def respond(kb: KnowledgeBase | None, query: str) -> str:
    """Answer a free-text query. Always returns a message, never raises."""
    if kb is None:
        return LOADING_RESPONSE

    result = match(kb, query)
    if not result.keywords:
        return EMPTY_QUERY_RESPONSE
    if result.repos:
        names = ", ".join(repo.name for repo in result.repos)
        return f"Yes, I found relevant signals in {names}. Ask me to summarize a specific repo."
    if result.skills:
        return (
            f"Likely experience with {', '.join(result.skills)} "
            "based on repo metadata and README content."
        )
    return NO_SIGNAL_RESPONSE
