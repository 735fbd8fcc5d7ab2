"""
github_client.py

Responsibility: Isolate all direct GitHub interaction.

This module must be the only place that:
- Constructs GitHub REST and raw-content URLs
- Sends HTTP requests to api.github.com / raw.githubusercontent.com
- Interprets GitHub API responses and `.env.example` contents

Two calls per lookup, nothing cached:
1) repository metadata (required; failures surface as `GitHubError`)
2) the example env file on the default branch (best-effort; failures mean "no env vars")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from deploybutton import __version__

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Repository not found"
FETCH_FAILED_MESSAGE = "Failed to fetch repository data"


class GitHubError(RuntimeError):
    pass


class RepoNotFoundError(GitHubError):
    def __init__(self, message: str = NOT_FOUND_MESSAGE) -> None:
        super().__init__(message)


class TransportError(GitHubError):
    def __init__(self, message: str = FETCH_FAILED_MESSAGE) -> None:
        super().__init__(message)


@dataclass(frozen=True)
class RepoMetadata:
    name: str
    full_name: str
    description: str | None
    default_branch: str


@dataclass(frozen=True)
class RepoRecord:
    """Normalized result of one lookup; `env_vars` keeps file order, duplicates included."""

    name: str
    full_name: str
    description: str | None
    env_vars: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "fullName": self.full_name,
            "description": self.description,
            "envVars": list(self.env_vars),
        }


def parse_env_names(text: str) -> list[str]:
    """
    Extract variable names from `.env.example` text.

    Each non-empty line not starting with `#` contributes the part before its first `=`.
    Order is preserved; names are neither deduplicated nor validated.
    """
    names: list[str] = []
    for raw in text.split("\n"):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        names.append(line.split("=", 1)[0])
    return names


class GitHubClient:
    def __init__(
        self,
        token: str | None = None,
        *,
        api_base: str = "https://api.github.com",
        raw_base: str = "https://raw.githubusercontent.com",
        env_file: str = ".env.example",
        default_branch: str = "main",
        timeout: float = 30,
        session: requests.Session | None = None,
    ) -> None:
        self._token = (token or "").strip() or None
        self._api_base = api_base.rstrip("/")
        self._raw_base = raw_base.rstrip("/")
        self._env_file = env_file.lstrip("/")
        self._default_branch = default_branch
        self._timeout = timeout
        # None means one-shot `requests.get` per call, safe across server worker threads.
        self._session = session

    @property
    def authenticated(self) -> bool:
        return self._token is not None

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"deploy-button/{__version__}",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _get(self, url: str, headers: dict[str, str] | None = None) -> requests.Response:
        getter = self._session.get if self._session is not None else requests.get
        return getter(url, headers=headers, timeout=self._timeout)

    def get_repo(self, owner: str, repo: str) -> RepoMetadata:
        """
        Fetch repository metadata.

        Any non-2xx status is reported as `RepoNotFoundError`; network and payload
        problems as `TransportError`.
        """
        url = f"{self._api_base}/repos/{owner}/{repo}"
        try:
            r = self._get(url, headers=self._headers())
        except requests.RequestException as e:
            logger.warning("GitHub metadata request failed for %s/%s: %s", owner, repo, e)
            raise TransportError() from e

        if not r.ok:
            logger.info("GitHub returned %s for %s/%s", r.status_code, owner, repo)
            raise RepoNotFoundError()

        try:
            data = r.json()
            return RepoMetadata(
                name=data["name"],
                full_name=data["full_name"],
                description=data.get("description"),
                default_branch=data.get("default_branch") or self._default_branch,
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise TransportError() from e

    def _fetch_env_example(self, owner: str, repo: str, branch: str) -> str | None:
        url = f"{self._raw_base}/{owner}/{repo}/{branch}/{self._env_file}"
        try:
            r = self._get(url)
        except requests.RequestException as e:
            logger.debug("Could not fetch %s: %s", url, e)
            return None
        if not r.ok:
            logger.debug("No %s for %s/%s (%s)", self._env_file, owner, repo, r.status_code)
            return None
        return r.text

    def fetch_env_vars(self, owner: str, repo: str, branch: str | None = None) -> list[str]:
        """
        Best-effort: return env var names from the example env file, or [] on any failure.
        """
        text = self._fetch_env_example(owner, repo, branch or self._default_branch)
        if text is None:
            return []
        return parse_env_names(text)

    def lookup(self, owner: str, repo: str) -> RepoRecord:
        """
        Resolve owner/repo into a `RepoRecord`. Every call hits GitHub again.
        """
        meta = self.get_repo(owner, repo)
        env_vars = self.fetch_env_vars(owner, repo, meta.default_branch)
        logger.debug("Resolved %s with %d env var(s)", meta.full_name, len(env_vars))
        return RepoRecord(
            name=meta.name,
            full_name=meta.full_name,
            description=meta.description,
            env_vars=env_vars,
        )
