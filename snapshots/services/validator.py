"""Accept/reject decision for raw posts, as an ordered chain of named checks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from snapshots.models.domain import RawPost
from snapshots.services.url_guard import is_allowed_url

ERROR_TEXT_PATTERNS: Tuple[re.Pattern[str], ...] = (
    re.compile(r"this site can['‘’ʼ]?t be reached", re.IGNORECASE),
    re.compile(r"refused to connect", re.IGNORECASE),
    re.compile(r"checking the connection", re.IGNORECASE),
    re.compile(r"dns.*address.*not found", re.IGNORECASE),
)

Predicate = Callable[[RawPost, str, Optional[str]], bool]


@dataclass(frozen=True)
class PostCheck:
    """A single rule; ``predicate`` returns True when the post passes."""

    name: str
    predicate: Predicate


def looks_like_error_page(text: str | None) -> bool:
    """True if ``text`` is browser chrome (DNS failure, refused connection, ...)."""
    stripped = (text or "").strip()
    return any(pattern.search(stripped) for pattern in ERROR_TEXT_PATTERNS)


def _platform_is_twitter(post: RawPost, snapshot_url: str, platform: Optional[str]) -> bool:
    return (platform or "").lower() == "twitter"


def _role_is_article(post: RawPost, snapshot_url: str, platform: Optional[str]) -> bool:
    return post.role == "article"


def _has_text(post: RawPost, snapshot_url: str, platform: Optional[str]) -> bool:
    return bool((post.text or "").strip())


def _url_allowed(post: RawPost, snapshot_url: str, platform: Optional[str]) -> bool:
    return is_allowed_url(snapshot_url)


def _not_error_page(post: RawPost, snapshot_url: str, platform: Optional[str]) -> bool:
    return not looks_like_error_page(post.text)


# Cheapest first: string compares, then URL parsing, then the regex scan.
DEFAULT_CHECKS: Tuple[PostCheck, ...] = (
    PostCheck("platform", _platform_is_twitter),
    PostCheck("role", _role_is_article),
    PostCheck("empty_text", _has_text),
    PostCheck("host", _url_allowed),
    PostCheck("error_page", _not_error_page),
)


class PostValidator:
    """Runs the checks in order and stops at the first failure."""

    def __init__(self, checks: Sequence[PostCheck] = DEFAULT_CHECKS) -> None:
        self._checks = tuple(checks)

    @property
    def checks(self) -> Tuple[PostCheck, ...]:
        return self._checks

    def with_check(self, check: PostCheck) -> "PostValidator":
        """Return a new validator with ``check`` appended to the chain."""
        return PostValidator((*self._checks, check))

    def rejection_reason(self, post: RawPost, snapshot_url: str, platform: Optional[str]) -> Optional[str]:
        for check in self._checks:
            if not check.predicate(post, snapshot_url, platform):
                return check.name
        return None

    def is_valid(self, post: RawPost, snapshot_url: str, platform: Optional[str]) -> bool:
        return self.rejection_reason(post, snapshot_url, platform) is None
