"""Shared test fixtures: a fake requests session standing in for GitHub."""

from __future__ import annotations

import json

import pytest
import requests

from deploybutton.github_client import GitHubClient

API = "https://api.github.com"
RAW = "https://raw.githubusercontent.com"


class FakeResponse:
    def __init__(self, status_code: int = 200, body: object = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._body = body
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> object:
        return json.loads(self.text)


class FakeSession:
    """Maps URL -> FakeResponse or exception; records every call."""

    def __init__(self) -> None:
        self.routes: dict[str, object] = {}
        self.calls: list[dict] = []

    def add(self, url: str, response: object) -> None:
        self.routes[url] = response

    def get(self, url: str, headers: dict | None = None, timeout: float | None = None) -> FakeResponse:
        self.calls.append({"url": url, "headers": headers or {}, "timeout": timeout})
        result = self.routes.get(url)
        if result is None:
            return FakeResponse(404, text="404: Not Found")
        if isinstance(result, Exception):
            raise result
        return result


def repo_payload(name: str = "next.js", owner: str = "vercel", **extra) -> dict:
    data = {
        "name": name,
        "full_name": f"{owner}/{name}",
        "description": "The React Framework",
        "default_branch": "main",
    }
    data.update(extra)
    return data


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session) -> GitHubClient:
    return GitHubClient(session=session)


@pytest.fixture
def next_js(session) -> FakeSession:
    """vercel/next.js with metadata and an .env.example on main."""
    session.add(f"{API}/repos/vercel/next.js", FakeResponse(200, repo_payload()))
    session.add(
        f"{RAW}/vercel/next.js/main/.env.example",
        FakeResponse(200, text="API_KEY=123\n# comment\n\nDB_URL=postgres://x"),
    )
    return session


@pytest.fixture
def connection_error() -> Exception:
    return requests.ConnectionError("connection refused")
