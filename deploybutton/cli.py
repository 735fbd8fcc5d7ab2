"""
cli.py

Responsibility: CLI entrypoint for deploy-button.

Commands:
- `generate URL`: parse URL -> look up repo on GitHub -> print deploy button snippet(s)
- `lookup OWNER REPO`: print the resolved repository record as JSON
- `serve`: run the FastAPI app with uvicorn

This module should orchestrate behavior but keep concerns isolated:
- URL validation: `url_parser.py`
- GitHub API: `github_client.py`
- Rendering: `generator.py`
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace

from deploybutton.config import ConfigError, Settings, load_settings
from deploybutton.generator import FORMATS, generate
from deploybutton.github_client import GitHubError
from deploybutton.url_parser import RepoURLError, parse_repo_url

logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    pass


def _settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    token = getattr(args, "github_token", None)
    if token and token.strip():
        settings = replace(settings, github_token=token.strip())
    return settings


def generate_cmd(args: argparse.Namespace) -> int:
    # Validate before building a client so bad input never reaches GitHub.
    ref = parse_repo_url(args.url)
    settings = _settings(args)
    record = settings.make_client().lookup(ref.owner, ref.repo)

    artifact = generate(
        ref.url,
        record,
        deploy_base=settings.deploy_base,
        button_image_url=settings.button_image_url,
    )

    if args.format == "url":
        print(artifact.deploy_url)
    elif args.format == "all":
        blocks = [f"# {fmt}\n{getattr(artifact, fmt)}" for fmt in FORMATS]
        print("\n\n".join(blocks))
    else:
        print(getattr(artifact, args.format))

    if record.env_vars:
        logger.info("Env vars for %s: %s", record.full_name, ", ".join(record.env_vars))
    return 0


def lookup_cmd(args: argparse.Namespace) -> int:
    if not args.owner or not args.repo:
        raise CLIError("Missing owner or repo parameter")
    record = _settings(args).make_client().lookup(args.owner, args.repo)
    print(json.dumps(record.to_dict(), indent=2))
    return 0


def serve_cmd(args: argparse.Namespace) -> int:
    import uvicorn

    from deploybutton.server import create_app

    settings = _settings(args)
    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Serving on http://%s:%s (GitHub auth: %s)", host, port, "token" if settings.github_token else "none")
    uvicorn.run(create_app(settings), host=host, port=port)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="deploy-button", description="Generate Vercel deploy buttons for GitHub repositories")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--config", default=None, help="YAML config file (or set env DEPLOY_BUTTON_CONFIG)")
    sub = p.add_subparsers(dest="command", required=True)

    g = sub.add_parser("generate", help="Print a deploy button for a GitHub repository URL")
    g.add_argument("url", help="GitHub repository URL, e.g. https://github.com/owner/repo")
    g.add_argument(
        "--format",
        choices=[*FORMATS, "url", "all"],
        default="markdown",
        help="Output format (default: markdown)",
    )
    g.add_argument("--github-token", default=None, help="GitHub token (or set env GITHUB_TOKEN)")
    g.set_defaults(func=generate_cmd)

    lk = sub.add_parser("lookup", help="Print repository name, description and env var names as JSON")
    lk.add_argument("owner", help="Repository owner (user or org)")
    lk.add_argument("repo", help="Repository name")
    lk.add_argument("--github-token", default=None, help="GitHub token (or set env GITHUB_TOKEN)")
    lk.set_defaults(func=lookup_cmd)

    s = sub.add_parser("serve", help="Run the web UI and JSON API")
    s.add_argument("--host", default=None, help="Bind address (default: from config, 127.0.0.1)")
    s.add_argument("--port", type=int, default=None, help="Port (default: from config, 8000)")
    s.set_defaults(func=serve_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        return int(args.func(args))
    except (CLIError, ConfigError, RepoURLError, GitHubError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
