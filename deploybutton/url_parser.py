"""
url_parser.py

Responsibility: Turn a user-entered repository URL into a validated owner/repo pair.

This implementation intentionally stays conservative:
- A missing scheme is filled in with `https://`; nothing else is normalized.
- Only `<host containing github.com>/<owner>/<repo>` (one optional trailing slash) is accepted.
- No `.git` stripping, no case folding, no `tree/<branch>` sub-paths.

Nothing here touches the network.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

INVALID_URL_MESSAGE = "Invalid GitHub repository URL"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


class RepoURLError(ValueError):
    pass


@dataclass(frozen=True)
class RepoReference:
    """Validated owner/repo pair plus the URL string it was parsed from."""

    owner: str
    repo: str
    # Input after scheme prefixing only; used verbatim as the deploy `repository-url`.
    url: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def with_scheme(raw: str) -> str:
    """
    Prefix `https://` when the string does not already start with a URI scheme.

    Surrounding whitespace is ignored for the scheme check but kept in the result.
    """
    if _SCHEME_RE.match(raw.strip()):
        return raw
    return f"https://{raw}"


def parse_repo_url(raw: str) -> RepoReference:
    """
    Parse a GitHub repository URL into a `RepoReference`.

    Raises `RepoURLError` when the string cannot be parsed, the host is not GitHub,
    or the path is not exactly `/<owner>/<repo>`.
    """
    try:
        parts = urlsplit(with_scheme(raw.strip()))
        host = parts.hostname or ""
    except ValueError as e:
        raise RepoURLError(INVALID_URL_MESSAGE) from e

    if "github.com" not in host:
        raise RepoURLError(INVALID_URL_MESSAGE)

    path = parts.path
    if path.endswith("/"):
        path = path[:-1]
    segments = path[1:].split("/") if path.startswith("/") else path.split("/")

    if len(segments) != 2 or not all(segments):
        raise RepoURLError(INVALID_URL_MESSAGE)

    owner, repo = segments
    return RepoReference(owner=owner, repo=repo, url=with_scheme(raw))
