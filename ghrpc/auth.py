"""GitHub token resolution.

Order (first non-empty wins, nothing is merged):

1. Explicit token (e.g. ``github.token`` from config)
2. GITHUB_TOKEN environment variable
3. GH_TOKEN environment variable (alternative used by gh CLI)
4. gh CLI hosts file (``$XDG_CONFIG_HOME/gh/hosts.yml`` or ``~/.config/gh/hosts.yml``)
"""

import logging
import os
from pathlib import Path

import yaml

from ghrpc.errors import CredentialFileCorrupt, NoCredentialFound

LOG = logging.getLogger("ghrpc.auth")

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")
CONFIG_HOME_ENV = "XDG_CONFIG_HOME"
GH_HOST = "github.com"
GH_TOKEN_FIELD = "oauth_token"


def gh_hosts_path() -> Path:
    """Return the gh CLI hosts file path for this environment."""
    xdg = os.environ.get(CONFIG_HOME_ENV)
    if xdg:
        return Path(xdg) / "gh" / "hosts.yml"
    return Path.home() / ".config" / "gh" / "hosts.yml"


def read_gh_token(path: Path | None = None) -> str:
    """Read the github.com oauth_token from the gh CLI hosts file.

    Args:
        path: Hosts file to read; defaults to gh_hosts_path()

    Returns:
        Token string

    Raises:
        NoCredentialFound: File missing, or no token for github.com
        CredentialFileCorrupt: File is not a YAML mapping
    """
    path = path or gh_hosts_path()
    if not path.is_file():
        raise NoCredentialFound(
            "No GitHub token found. Set GITHUB_TOKEN env var or run 'gh auth login'. "
            f"Config path checked: {path}"
        )

    try:
        config = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise CredentialFileCorrupt(f"Failed to parse gh config {path}: {e}") from e
    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise CredentialFileCorrupt(f"Failed to parse gh config {path}: expected a mapping")

    host = config.get(GH_HOST)
    token = host.get(GH_TOKEN_FIELD) if isinstance(host, dict) else None
    if not isinstance(token, str) or not token.strip():
        raise NoCredentialFound(f"No {GH_TOKEN_FIELD} found for {GH_HOST} in {path}")
    return token.strip()


def resolve_token(explicit: str | None = None) -> str:
    """Resolve the bearer token used for every GitHub call.

    Raises:
        NoCredentialFound: No source produced a token
        CredentialFileCorrupt: Fell through to an unparsable hosts file
    """
    if explicit:
        LOG.debug("Using explicitly configured GitHub token")
        return explicit

    for name in TOKEN_ENV_VARS:
        value = os.environ.get(name)
        if value:
            LOG.debug("Using GitHub token from %s", name)
            return value

    token = read_gh_token()
    LOG.debug("Using GitHub token from gh CLI config")
    return token
