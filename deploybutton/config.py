"""
config.py

Responsibility: Load runtime settings into a typed, immutable model.

Sources, later ones winning:
1) built-in defaults
2) an optional YAML file (a flat mapping whose keys mirror `Settings` fields)
3) environment: `GITHUB_TOKEN`

The config file path comes from the caller or, failing that, `DEPLOY_BUTTON_CONFIG`.
Callers read settings once and pass values into `GitHubClient` / the app explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from deploybutton.generator import DEFAULT_BUTTON_IMAGE_URL, DEFAULT_DEPLOY_BASE
from deploybutton.github_client import GitHubClient

CONFIG_ENV_VAR = "DEPLOY_BUTTON_CONFIG"
TOKEN_ENV_VAR = "GITHUB_TOKEN"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    github_token: str | None = None
    api_base: str = "https://api.github.com"
    raw_base: str = "https://raw.githubusercontent.com"
    env_file: str = ".env.example"
    default_branch: str = "main"
    deploy_base: str = DEFAULT_DEPLOY_BASE
    button_image_url: str = DEFAULT_BUTTON_IMAGE_URL
    timeout: float = 30
    host: str = "127.0.0.1"
    port: int = 8000

    def make_client(self) -> GitHubClient:
        return GitHubClient(
            self.github_token,
            api_base=self.api_base,
            raw_base=self.raw_base,
            env_file=self.env_file,
            default_branch=self.default_branch,
            timeout=self.timeout,
        )


_FIELD_TYPES = {f.name: f.type for f in fields(Settings)}


def _coerce(key: str, value: Any) -> Any:
    kind = _FIELD_TYPES[key]
    if value is None:
        if kind == "str | None":
            return None
        raise ConfigError(f"`{key}` must not be null.")
    try:
        if kind == "int":
            return int(value)
        if kind == "float":
            return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"`{key}` must be a number, got {value!r}.") from e
    return str(value).strip()


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}") from e
    if not isinstance(data, dict):
        raise ConfigError("Config file must be a mapping/object at the top level.")

    unknown = sorted(str(k) for k in data if k not in _FIELD_TYPES)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")
    return {k: _coerce(k, v) for k, v in data.items()}


def load_settings(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """
    Build `Settings` from defaults, an optional YAML file and the environment.

    An empty or whitespace-only token counts as no token.
    """
    env = os.environ if environ is None else environ

    path = config_path or env.get(CONFIG_ENV_VAR) or None
    values = _read_config_file(Path(path)) if path else {}

    token = env.get(TOKEN_ENV_VAR)
    if token is not None and token.strip():
        values["github_token"] = token.strip()
    if not values.get("github_token"):
        values["github_token"] = None

    return replace(Settings(), **values)
