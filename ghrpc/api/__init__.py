"""GitHub API client."""

from ghrpc.api.client import GitHubClient

__all__ = ["GitHubClient"]
