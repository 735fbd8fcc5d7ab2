import json

import pytest

from conftest import API, FakeResponse, FakeSession, repo_payload
from deploybutton import cli
from deploybutton.github_client import GitHubClient


@pytest.fixture
def fake_github(monkeypatch, next_js: FakeSession) -> FakeSession:
    """Route every client the CLI builds through the fake session."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("DEPLOY_BUTTON_CONFIG", raising=False)
    original = GitHubClient.__init__

    def init(self, *args, **kwargs):
        kwargs["session"] = next_js
        original(self, *args, **kwargs)

    monkeypatch.setattr(GitHubClient, "__init__", init)
    return next_js


def test_generate_markdown(fake_github, capsys) -> None:
    assert cli.main(["generate", "github.com/vercel/next.js"]) == 0
    out = capsys.readouterr().out.strip()
    assert out.startswith("[![Deploy with Vercel](https://vercel.com/button)](https://vercel.com/new/clone?")
    assert "env=API_KEY%2CDB_URL" in out


def test_generate_url_format(fake_github, capsys) -> None:
    fake_github.add(f"{API}/repos/o/r", FakeResponse(200, repo_payload(name="r", owner="o")))
    assert cli.main(["generate", "https://github.com/o/r", "--format", "url"]) == 0
    assert capsys.readouterr().out.strip() == (
        "https://vercel.com/new/clone?repository-url=https%3A%2F%2Fgithub.com%2Fo%2Fr"
        "&project-name=r&repository-name=r"
    )


def test_generate_all_formats(fake_github, capsys) -> None:
    assert cli.main(["generate", "https://github.com/vercel/next.js", "--format", "all"]) == 0
    out = capsys.readouterr().out
    assert "# markdown" in out and "# html" in out and "# component" in out


def test_generate_passes_token(fake_github, capsys) -> None:
    assert cli.main(["generate", "https://github.com/vercel/next.js", "--github-token", "tok"]) == 0
    assert fake_github.calls[0]["headers"]["Authorization"] == "Bearer tok"


def test_generate_invalid_url(fake_github, capsys) -> None:
    assert cli.main(["generate", "not a url"]) == 1
    assert "error: Invalid GitHub repository URL" in capsys.readouterr().err
    assert fake_github.calls == []


def test_generate_not_found(fake_github, capsys) -> None:
    assert cli.main(["generate", "https://github.com/nobody/nothing"]) == 1
    assert "error: Repository not found" in capsys.readouterr().err


def test_lookup(fake_github, capsys) -> None:
    assert cli.main(["lookup", "vercel", "next.js"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["fullName"] == "vercel/next.js"
    assert data["envVars"] == ["API_KEY", "DB_URL"]


def test_bad_config(fake_github, tmp_path, capsys) -> None:
    assert cli.main(["--config", str(tmp_path / "missing.yaml"), "lookup", "vercel", "next.js"]) == 1
    assert "Config file does not exist" in capsys.readouterr().err


def test_serve_runs_app_with_uvicorn(monkeypatch) -> None:
    from fastapi import FastAPI

    monkeypatch.delenv("DEPLOY_BUTTON_CONFIG", raising=False)
    monkeypatch.setenv("GITHUB_TOKEN", "tok")
    seen = {}

    def fake_run(app, host, port):
        seen.update(app=app, host=host, port=port)

    monkeypatch.setattr("uvicorn.run", fake_run)

    assert cli.main(["serve", "--host", "0.0.0.0", "--port", "9001"]) == 0
    assert isinstance(seen["app"], FastAPI)
    assert (seen["host"], seen["port"]) == ("0.0.0.0", 9001)


def test_serve_defaults_come_from_config(monkeypatch, tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("host: 10.0.0.5\nport: 8123\n")
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    seen = {}
    monkeypatch.setattr("uvicorn.run", lambda app, host, port: seen.update(host=host, port=port))

    assert cli.main(["--config", str(path), "serve"]) == 0
    assert seen == {"host": "10.0.0.5", "port": 8123}
