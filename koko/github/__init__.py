"""GitHub API access."""

from koko.github.client import GitHubClient
from koko.github.exceptions import GitHubError

__all__ = ["GitHubClient", "GitHubError"]
