"""GitHub API access."""

from .client import GitHubClient, pull_request_from_api

__all__ = ["GitHubClient", "pull_request_from_api"]
