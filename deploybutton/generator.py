"""
generator.py

Responsibility: Build the Vercel clone-and-deploy URL for a repository and render it
into the three copy-paste encodings (markdown, HTML, React component).

Rules:
- Query parameters are emitted in a fixed order: repository-url, project-name,
  repository-name, then env / envDescription only when env vars exist.
- The deploy URL is substituted into the templates verbatim (autoescape is off).
- Output is a pure function of (repo_url, record, bases); no I/O beyond loading templates.

This module intentionally does NOT know about GitHub or HTTP.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote_plus, urlencode

from jinja2 import Environment, PackageLoader, StrictUndefined

from deploybutton.github_client import RepoRecord

DEFAULT_DEPLOY_BASE = "https://vercel.com/new/clone"
DEFAULT_BUTTON_IMAGE_URL = "https://vercel.com/button"
BUTTON_ALT_TEXT = "Deploy with Vercel"

FORMATS = ("markdown", "html", "component")

_TEMPLATES = {
    "markdown": "button.md.j2",
    "html": "button.html.j2",
    "component": "button.tsx.j2",
}

_env = Environment(
    loader=PackageLoader("deploybutton", "templates"),
    autoescape=False,
    undefined=StrictUndefined,
)


@dataclass(frozen=True)
class DeployArtifact:
    deploy_url: str
    markdown: str
    html: str
    component: str

    def to_dict(self) -> dict[str, str]:
        return {
            "deployUrl": self.deploy_url,
            "markdown": self.markdown,
            "html": self.html,
            "component": self.component,
        }


def _quote_form(value: str, safe: str = "", encoding: str | None = None, errors: str | None = None) -> str:
    # application/x-www-form-urlencoded as browsers serialize it: `*` stays, `~` is escaped.
    return quote_plus(value, safe="*", encoding=encoding, errors=errors).replace("~", "%7E")


def env_description(name: str) -> str:
    return f"Environment variables required for {name}"


def build_deploy_url(
    repo_url: str,
    record: RepoRecord,
    *,
    deploy_base: str = DEFAULT_DEPLOY_BASE,
) -> str:
    """
    Return the clone-and-deploy URL.

    `repo_url` goes into `repository-url` as given; names come from `record.name`.
    """
    params: list[tuple[str, str]] = [
        ("repository-url", repo_url),
        ("project-name", record.name),
        ("repository-name", record.name),
    ]
    if record.env_vars:
        params.append(("env", ",".join(record.env_vars)))
        params.append(("envDescription", env_description(record.name)))
    return f"{deploy_base}?{urlencode(params, quote_via=_quote_form)}"


def render_button(
    fmt: str,
    deploy_url: str,
    *,
    button_image_url: str = DEFAULT_BUTTON_IMAGE_URL,
) -> str:
    try:
        template = _env.get_template(_TEMPLATES[fmt])
    except KeyError:
        raise ValueError(f"Unknown format: {fmt!r} (expected one of {', '.join(FORMATS)})") from None
    return template.render(
        deploy_url=deploy_url,
        button_image_url=button_image_url,
        alt_text=BUTTON_ALT_TEXT,
    )


def generate(
    repo_url: str,
    record: RepoRecord,
    *,
    deploy_base: str = DEFAULT_DEPLOY_BASE,
    button_image_url: str = DEFAULT_BUTTON_IMAGE_URL,
) -> DeployArtifact:
    deploy_url = build_deploy_url(repo_url, record, deploy_base=deploy_base)
    rendered = {
        fmt: render_button(fmt, deploy_url, button_image_url=button_image_url)
        for fmt in FORMATS
    }
    return DeployArtifact(deploy_url=deploy_url, **rendered)
