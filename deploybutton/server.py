"""FastAPI app: repository lookup API, deploy-button API and the HTML form page."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Query
from fastapi.responses import HTMLResponse, JSONResponse
from jinja2 import Environment, PackageLoader, select_autoescape
from pydantic import BaseModel, Field

from deploybutton import __version__
from deploybutton.config import Settings, load_settings
from deploybutton.generator import DeployArtifact, generate
from deploybutton.github_client import FETCH_FAILED_MESSAGE, GitHubClient, GitHubError, RepoRecord
from deploybutton.url_parser import RepoURLError, parse_repo_url

logger = logging.getLogger(__name__)

MISSING_PARAMS_MESSAGE = "Missing owner or repo parameter"
MISSING_URL_MESSAGE = "Missing url parameter"

_pages = Environment(
    loader=PackageLoader("deploybutton", "templates"),
    autoescape=select_autoescape(["html"]),
)


# Response models
class ErrorResponse(BaseModel):
    message: str


class RepoInfoResponse(BaseModel):
    """Wire shape of a resolved repository."""
    name: str
    fullName: str
    description: str | None = None
    envVars: list[str] = Field(default_factory=list)


class DeployButtonResponse(BaseModel):
    repository: RepoInfoResponse
    deployUrl: str
    markdown: str
    html: str
    component: str


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def create_app(
    settings: Settings | None = None,
    client: GitHubClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or load_settings()
    client = client or settings.make_client()

    app = FastAPI(
        title="Deploy Button API",
        description="Generate Vercel deploy buttons for GitHub repositories",
        version=__version__,
    )

    def _lookup(owner: str, repo: str) -> RepoRecord:
        logger.info("Looking up %s/%s", owner, repo)
        return client.lookup(owner, repo)

    def _generate(repo_url: str, record: RepoRecord) -> DeployArtifact:
        return generate(
            repo_url,
            record,
            deploy_base=settings.deploy_base,
            button_image_url=settings.button_image_url,
        )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get(
        "/api/repo-info",
        response_model=RepoInfoResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    def repo_info(
        owner: str | None = Query(None, description="Repository owner"),
        repo: str | None = Query(None, description="Repository name"),
    ):
        """Resolve owner/repo into name, full name, description and env var names."""
        if not owner or not repo:
            return _error(400, MISSING_PARAMS_MESSAGE)
        try:
            record = _lookup(owner, repo)
        except GitHubError as e:
            return _error(500, str(e) or FETCH_FAILED_MESSAGE)
        return record.to_dict()

    @app.get(
        "/api/deploy-button",
        response_model=DeployButtonResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    def deploy_button(url: str | None = Query(None, description="GitHub repository URL")):
        """Validate a repository URL, resolve it and render every button format."""
        if not url:
            return _error(400, MISSING_URL_MESSAGE)
        try:
            ref = parse_repo_url(url)
        except RepoURLError as e:
            return _error(400, str(e))
        try:
            record = _lookup(ref.owner, ref.repo)
        except GitHubError as e:
            return _error(500, str(e) or FETCH_FAILED_MESSAGE)
        artifact = _generate(ref.url, record)
        return {"repository": record.to_dict(), **artifact.to_dict()}

    @app.get("/", response_class=HTMLResponse)
    def index(url: str = ""):
        """Form page; renders the button and snippets when `url` is given."""
        error = ""
        record = None
        artifact = None
        if url:
            try:
                ref = parse_repo_url(url)
                record = _lookup(ref.owner, ref.repo)
                artifact = _generate(ref.url, record)
            except (RepoURLError, GitHubError) as e:
                error = str(e)

        page = _pages.get_template("index.html").render(
            url=url,
            error=error,
            record=record,
            artifact=artifact,
            button_image_url=settings.button_image_url,
        )
        return HTMLResponse(page)

    return app
