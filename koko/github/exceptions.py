"""Exceptions for GitHub API failures.

These replace raw httpx errors with messages that say which pull request
lookup failed and what to check.
"""

from __future__ import annotations

from koko.errors import KokoError


class GitHubError(KokoError):
    """Base class for all GitHub client errors."""

    def __init__(self, message: str, *, status_code: int | None = None, hint: str = "") -> None:
        self.status_code = status_code
        self.hint = hint
        super().__init__(message)


class GitHubAuthError(GitHubError):
    """Token is missing, invalid, or lacks access to the repository."""


class GitHubNotFoundError(GitHubError):
    """Repository or pull request does not exist (or is hidden from the token)."""


class GitHubRateLimitError(GitHubError):
    """Rate limit exhausted and the reset lies beyond the call deadline."""


class GitHubServerError(GitHubError):
    """GitHub returned a 5xx response."""


class GitHubConnectionError(GitHubError):
    """GitHub's API endpoint could not be reached."""


class GitHubTimeoutError(GitHubError):
    """The call did not complete before its deadline."""


_STATUS_MAP: dict[int, tuple[type[GitHubError], str, str]] = {
    401: (
        GitHubAuthError,
        "Authentication failed: the GitHub token is invalid or expired.",
        "Check the GITHUB_TOKEN environment variable.",
    ),
    403: (
        GitHubAuthError,
        "Access denied: the GitHub token lacks permission for this repository.",
        "Grant the token read access to pull requests.",
    ),
    404: (
        GitHubNotFoundError,
        "Pull request not found.",
        "Verify the organization, repository, and pull request number.",
    ),
    429: (
        GitHubRateLimitError,
        "Rate limit exceeded.",
        "Wait for the rate limit window to reset.",
    ),
    500: (GitHubServerError, "GitHub internal server error.", "Try again in a moment."),
    502: (GitHubServerError, "GitHub returned a bad gateway error.", "Try again in a moment."),
    503: (GitHubServerError, "GitHub is temporarily unavailable.", "Try again in a moment."),
}


def raise_for_status(status_code: int, resource: str, raw_message: str = "") -> None:
    """Raise a GitHubError matching the HTTP status code of a response.

    Call this instead of httpx's resp.raise_for_status() so callers get a
    typed error with a hint instead of a raw HTTPStatusError.
    """
    if 200 <= status_code < 300:
        return

    default_class = GitHubServerError if status_code >= 500 else GitHubError
    exc_class, message, hint = _STATUS_MAP.get(
        status_code,
        (default_class, f"Unexpected HTTP {status_code} from GitHub.", ""),
    )

    full_message = f"unable to retrieve {resource}: {message}"
    if raw_message:
        short = raw_message[:200].replace("\n", " ")
        full_message += f" ({short})"

    raise exc_class(full_message, status_code=status_code, hint=hint)
