"""Keyword extraction shared by the knowledge base and the query matcher."""

import re

STOP_WORDS = frozenset(
    {
        "the",
        "and",
        "for",
        "with",
        "this",
        "that",
        "from",
        "into",
        "your",
        "you",
        "about",
        "using",
        "uses",
        "used",
        "use",
        "project",
        "projects",
        "build",
        "built",
        "create",
        "creating",
        "app",
        "apps",
        "repo",
        "repository",
    }
)

# Keep "+", "#", "." and "-" so tokens like c++, c#, node.js and scikit-learn survive
_NON_TOKEN_RE = re.compile(r"[^a-z0-9\s+#.-]")
MIN_TOKEN_LENGTH = 3


def extract_keywords(text: str | None) -> list[str]:
    """Lower-case, strip punctuation, drop short tokens and stop words, dedupe in order."""
    if not text:
        return []
    cleaned = _NON_TOKEN_RE.sub(" ", text.lower())
    seen: dict[str, None] = {}
    for token in cleaned.split():
        if len(token) >= MIN_TOKEN_LENGTH and token not in STOP_WORDS:
            seen.setdefault(token, None)
    return list(seen)
