"""Minimal GitHub REST client for pull request lookups.

Keeps one httpx.AsyncClient with the bearer token injected for every call.
Secondary rate limits are waited out transparently as long as the wait fits
inside the per-call deadline.
"""

from __future__ import annotations

import asyncio
import time
from urllib.parse import quote

import httpx
from loguru import logger

from koko import __version__
from koko.config.schema import DEFAULT_GITHUB_API_URL
from koko.errors import ConfigError
from koko.github.exceptions import (
    GitHubConnectionError,
    GitHubError,
    GitHubRateLimitError,
    GitHubTimeoutError,
    raise_for_status,
)

DEFAULT_TIMEOUT_SECONDS = 30.0
_RATE_LIMIT_STATUSES = (403, 429)


class GitHubClient:
    """Read-only access to the pull requests of GitHub repositories."""

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_GITHUB_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not token or not token.strip():
            raise ConfigError("github token is not set")

        self._timeout = timeout
        self._log = logger.bind(component="github")
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "User-Agent": f"koko-slack-bot/{__version__}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def pr_description(self, organization: str, repository: str, pull_request: int) -> str:
        """Return the description of a pull request.

        A pull request without a description yields an empty string. The
        whole lookup, including any rate limit wait, is bounded by the
        client timeout.
        """
        resource = f"pull request {organization}/{repository}#{pull_request}"
        owner, repo = quote(organization, safe=""), quote(repository, safe="")
        path = f"/repos/{owner}/{repo}/pulls/{pull_request}"

        try:
            response = await self._get(path, resource)
        except TimeoutError as exc:
            raise GitHubTimeoutError(
                f"unable to retrieve {resource}: no response within {self._timeout:g}s",
                hint="GitHub may be slow or unreachable. Try again later.",
            ) from exc
        except httpx.TimeoutException as exc:
            raise GitHubTimeoutError(
                f"unable to retrieve {resource}: {exc}",
                hint="GitHub may be slow or unreachable. Try again later.",
            ) from exc
        except httpx.TransportError as exc:
            raise GitHubConnectionError(
                f"unable to retrieve {resource}: {exc}",
                hint="Check network access to the GitHub API.",
            ) from exc
        except httpx.HTTPError as exc:
            raise GitHubError(f"unable to retrieve {resource}: {exc}") from exc

        raise_for_status(response.status_code, resource, response.text)

        try:
            data = response.json()
        except ValueError as exc:
            raise GitHubError(f"unable to decode {resource}: {exc}") from exc

        if not isinstance(data, dict):
            raise GitHubError(
                f"unable to decode {resource}: expected a JSON object, got {type(data).__name__}"
            )
        body = data.get("body")
        if body is not None and not isinstance(body, str):
            raise GitHubError(
                f"unable to decode {resource}: body is {type(body).__name__}, not a string"
            )

        self._log.debug("Retrieved {}", resource)
        return body or ""

    async def _get(self, path: str, resource: str) -> httpx.Response:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout

        async with asyncio.timeout_at(deadline):
            while True:
                response = await self._client.get(path)
                delay = _rate_limit_delay(response)
                if delay is None:
                    return response

                if loop.time() + delay >= deadline:
                    raise GitHubRateLimitError(
                        f"unable to retrieve {resource}: rate limited for another {delay:.0f}s",
                        status_code=response.status_code,
                        hint="Wait for the rate limit window to reset.",
                    )

                self._log.warning(
                    "Rate limited by GitHub while fetching {}; retrying in {:.1f}s",
                    resource,
                    delay,
                )
                await asyncio.sleep(delay)


def _rate_limit_delay(response: httpx.Response) -> float | None:
    """Return how long to wait before retrying, or None if not rate limited."""
    if response.status_code not in _RATE_LIMIT_STATUSES:
        return None

    retry_after = response.headers.get("retry-after")
    if retry_after is not None:
        try:
            return max(float(retry_after), 0.0)
        except ValueError:
            return None

    if response.headers.get("x-ratelimit-remaining") == "0":
        reset = response.headers.get("x-ratelimit-reset", "")
        if reset.isdigit():
            return max(int(reset) - time.time(), 0.0)

    return None
