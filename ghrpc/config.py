"""Configuration loading from YAML and environment.

The GitHub token may be set here (``github.token``) but is normally left
empty: the credential resolver then falls back to GITHUB_TOKEN, GH_TOKEN
and the gh CLI hosts file. Never put real tokens in committed config files.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ghrpc import __version__

# Injected by load_config so ${VAR} substitution sees a consistent snapshot
_current_env: dict[str, str] = {}


class GitHubConfig(BaseSettings):
    """GitHub API endpoints and HTTP client settings."""

    model_config = SettingsConfigDict(env_prefix="GHRPC_GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT; prefer env or gh CLI login")
    graphql_url: str = Field(default="https://api.github.com/graphql", description="GraphQL endpoint")
    api_url: str = Field(default="https://api.github.com", description="REST API base URL")
    api_version: str = Field(default="2022-11-28", description="X-GitHub-Api-Version for REST calls")
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    pool_maxsize: int = Field(default=5, ge=1, le=100, description="Idle connections kept per host")
    user_agent: str = Field(default=f"ghrpc/{__version__}", description="User-Agent header")


class ServiceConfig(BaseSettings):
    """RPC service identity and worker pool."""

    model_config = SettingsConfigDict(env_prefix="GHRPC_SERVICE_", extra="ignore")

    name: str = Field(default="github", description="Service name used as method namespace")
    socket: str = Field(
        default="~/.fgp/services/github/daemon.sock",
        description="Socket path for the serving framework",
    )
    workers: int = Field(default=8, ge=1, le=64, description="Threads running concurrent API calls")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="GHRPC_LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def explicit_token(self) -> str | None:
        """Token from config, ignoring unsubstituted ${VAR} placeholders."""
        t = self.github.token
        if t and t.strip() and not t.startswith("${"):
            return t.strip()
        return None


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    A missing file yields defaults (plus GHRPC_* env overrides).
    """
    global _current_env

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text()) or {}
    raw = _substitute_env(raw)

    return AppConfig(
        github=GitHubConfig(**(raw.get("github") or {})),
        service=ServiceConfig(**(raw.get("service") or {})),
        logging=LoggingConfig(**(raw.get("logging") or {})),
    )
