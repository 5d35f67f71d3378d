"""Data models and constants for the portfolio knowledge base."""

from dataclasses import dataclass, field

MAX_SKILLS = 60  # Skill index cap across all repos
MAX_README_KEYWORDS = 40  # Per-repo cap on README-derived keywords
SHALLOW_SCAN_LIMIT = 10  # Repos scanned in shallow mode (one README fetch each)
MAX_REPO_MATCHES = 3
MAX_SKILL_MATCHES = 5


@dataclass(frozen=True)
class Profile:
    """Public GitHub profile for one handle."""

    login: str
    name: str | None = None
    bio: str | None = None
    followers: int = 0
    following: int = 0
    public_repos: int = 0
    avatar_url: str | None = None
    html_url: str | None = None
    location: str | None = None
    blog: str | None = None
    twitter_username: str | None = None

    @classmethod
    def from_api(cls, payload: dict) -> "Profile":
        """Create a Profile from a /users/{handle} response body."""
        return cls(
            login=payload["login"],
            name=payload.get("name"),
            bio=payload.get("bio"),
            followers=payload.get("followers") or 0,
            following=payload.get("following") or 0,
            public_repos=payload.get("public_repos") or 0,
            avatar_url=payload.get("avatar_url"),
            html_url=payload.get("html_url"),
            location=payload.get("location"),
            blog=payload.get("blog") or None,
            twitter_username=payload.get("twitter_username"),
        )


@dataclass(frozen=True)
class RepoSummary:
    """Snapshot of one repository from /users/{handle}/repos."""

    id: int
    name: str
    full_name: str  # e.g. "octocat/hello-world"
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    fork: bool = False
    updated_at: str = ""  # ISO-8601, as returned by the API
    html_url: str | None = None
    homepage: str | None = None

    @classmethod
    def from_api(cls, payload: dict) -> "RepoSummary":
        return cls(
            id=payload["id"],
            name=payload["name"],
            full_name=payload["full_name"],
            description=payload.get("description"),
            language=payload.get("language"),
            stargazers_count=payload.get("stargazers_count") or 0,
            forks_count=payload.get("forks_count") or 0,
            fork=bool(payload.get("fork")),
            updated_at=payload.get("updated_at") or "",
            html_url=payload.get("html_url"),
            homepage=payload.get("homepage") or None,
        )


@dataclass(frozen=True)
class KnowledgeBaseRepo:
    name: str
    description: str | None = None
    readme: str | None = None
    language: str | None = None


@dataclass(frozen=True)
class KnowledgeBase:
    """Skill index and per-repo text for one user.

    Published as a whole by the builder; never updated field by field.
    """

    username: str
    skills: tuple[str, ...] = ()
    repos: tuple[KnowledgeBaseRepo, ...] = ()


@dataclass
class RateLimitStatus:
    """Quota snapshot from /rate_limit or from response headers."""

    remaining: int
    limit: int
    reset_at: float  # Unix timestamp


@dataclass(frozen=True)
class ChatMessage:
    id: str
    role: str  # "user" or "bot"
    content: str


@dataclass
class Portfolio:
    """Result of a successful search: the profile and its candidate repos."""

    profile: Profile
    readme_html: str | None = None
    repos: list[RepoSummary] = field(default_factory=list)
