"""Build a searchable skill index from a GitHub user's public repositories.

Fetches the profile, repos and READMEs through the rate-limited REST API,
extracts keywords into a bounded skill index and answers free-text queries
with deterministic matches.
"""

from .cli import main
from .fetcher import DataFetcher
from .knowledge_base import KnowledgeBaseBuilder, ScanDepth, build_knowledge_base, select_candidates
from .matcher import respond
from .models import KnowledgeBase, Profile, RepoSummary
from .rate_limit import RateLimitGate
from .session import PortfolioSession

__all__ = [
    "main",
    "DataFetcher",
    "KnowledgeBase",
    "KnowledgeBaseBuilder",
    "PortfolioSession",
    "Profile",
    "RateLimitGate",
    "RepoSummary",
    "ScanDepth",
    "build_knowledge_base",
    "respond",
    "select_candidates",
]

if __name__ == "__main__":
    main()
