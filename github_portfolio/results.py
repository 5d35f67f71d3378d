"""Outcomes of a single fetch against the GitHub API.

Every fetch returns exactly one of these variants instead of raising, so call
sites handle each case explicitly with isinstance checks.
"""

from dataclasses import dataclass
from typing import Any, Union

DEFAULT_ERROR_MESSAGE = "Unable to load data. Try again in a moment."
RATE_LIMIT_MESSAGE = "GitHub is taking a breather! Rate limit reached."


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class NotFound:
    """The resource legitimately does not exist (404 with opt-in)."""


@dataclass(frozen=True)
class RateLimited:
    reset_at: float  # Unix timestamp when the quota recovers
    message: str = RATE_LIMIT_MESSAGE


@dataclass(frozen=True)
class RemoteError:
    message: str = DEFAULT_ERROR_MESSAGE


FetchResult = Union[Ok, NotFound, RateLimited, RemoteError]
