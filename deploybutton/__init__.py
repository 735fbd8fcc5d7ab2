"""
deploybutton package

Turns a GitHub repository URL into a "Deploy with Vercel" button.

Key responsibilities are split across modules:
- `url_parser.py`: validate a user-entered URL into an owner/repo reference
- `github_client.py`: isolated GitHub REST / raw-content interactions (metadata + env file)
- `generator.py`: deploy URL construction and markdown / HTML / component rendering
- `config.py`: settings from an optional YAML file and the environment
- `server.py`: FastAPI app (JSON API + HTML page)
- `cli.py`: CLI entrypoint (generate / lookup / serve)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
