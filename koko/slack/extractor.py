"""Extract gateway schema change details from a change feed message.

The change feed integration posts one attachment per change. Its fields
carry the pull request ref and the commit URL:

    Ref     refs/pull/5291/merge
    Commit  <https://github.com/kong/team-koko-bot/commit/180edc|180edc>

Validation runs in a fixed order and stops at the first failure, so the
raised error always names the earliest problem in the message.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from koko.errors import KokoError
from koko.slack.events import InboundMessage

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")

REF_MIN_TOKENS = 3
COMMIT_MIN_TOKENS = 5


@dataclass(frozen=True, slots=True)
class GatewaySchemaChange:
    """Repository and pull request behind a gateway schema change."""

    organization: str
    repository: str
    pull_request: int


class ExtractionError(KokoError):
    """Base class for change feed messages that cannot be interpreted.

    `reason` is a stable identifier for the failure; the message text
    carries the details.
    """

    reason = "ExtractionError"


class MissingBotIDError(ExtractionError):
    reason = "MissingBotID"

    def __init__(self) -> None:
        super().__init__("bot ID is missing from message event")


class MissingAttachmentsError(ExtractionError):
    reason = "MissingAttachments"

    def __init__(self) -> None:
        super().__init__("attachments are missing from message event")


class TooManyAttachmentsError(ExtractionError):
    reason = "TooManyAttachments"

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"too many attachments from message event: {count} > 1")


class MissingAuthorError(ExtractionError):
    reason = "MissingAuthor"

    def __init__(self) -> None:
        super().__init__("gateway change event is missing author")


class RefTokenCountError(ExtractionError):
    reason = "RefTokenCountError"

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f"not enough tokens in ref value to parse pull request: {count} < {REF_MIN_TOKENS}"
        )


class PullRequestParseError(ExtractionError):
    reason = "PullRequestParseError"

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"unable to convert pull request to number: {token}")


class CommitFormatError(ExtractionError):
    reason = "CommitFormatError"

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"invalid commit value format: {value}")


class CommitTokenCountError(ExtractionError):
    reason = "CommitTokenCountError"

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f"not enough tokens in commit value to parse repository: {count} < {COMMIT_MIN_TOKENS}"
        )


class MissingPullRequestError(ExtractionError):
    reason = "MissingPullRequest"

    def __init__(self) -> None:
        super().__init__("pull request number was not present in message event")


class MissingOrganizationError(ExtractionError):
    reason = "MissingOrganization"

    def __init__(self) -> None:
        super().__init__("organization was not present in message event")


class MissingRepositoryError(ExtractionError):
    reason = "MissingRepository"

    def __init__(self) -> None:
        super().__init__("repository was not present in message event")


def extract_gateway_schema_change(message: InboundMessage) -> GatewaySchemaChange:
    """Build a GatewaySchemaChange from a change feed message.

    Raises:
        ExtractionError: a subclass naming the first validation step that
            failed.
    """
    if not message.bot_id:
        raise MissingBotIDError()

    count = len(message.attachments)
    if count == 0:
        raise MissingAttachmentsError()
    if count > 1:
        raise TooManyAttachmentsError(count)

    attachment = message.attachments[0]
    if not attachment.author_name:
        raise MissingAuthorError()

    # Repeated titles overwrite earlier values: the last field wins.
    pull_request: int | None = None
    organization = ""
    repository = ""
    for f in attachment.fields:
        title = f.title.lower()
        if title == "ref":
            pull_request = _parse_ref(f.value)
        elif title == "commit":
            organization, repository = _parse_commit(f.value)

    if pull_request is None:
        raise MissingPullRequestError()
    if not organization:
        raise MissingOrganizationError()
    if not repository:
        raise MissingRepositoryError()

    return GatewaySchemaChange(
        organization=organization,
        repository=repository,
        pull_request=pull_request,
    )


def _parse_ref(value: str) -> int:
    """Return the pull request number from a ref such as refs/pull/42/merge."""
    tokens = value.split("/")
    if len(tokens) < REF_MIN_TOKENS:
        raise RefTokenCountError(len(tokens))
    return _parse_int64(tokens[2])


def _parse_commit(value: str) -> tuple[str, str]:
    """Return (organization, repository) from a Slack-formatted commit link."""
    tokens = value.split("|")
    if len(tokens) != 2:
        raise CommitFormatError(value)

    url_tokens = tokens[0].split("/")
    if len(url_tokens) < COMMIT_MIN_TOKENS:
        raise CommitTokenCountError(len(url_tokens))
    return url_tokens[3], url_tokens[4]


def _parse_int64(token: str) -> int:
    # int() would also accept surrounding whitespace and digit underscores
    if not _DECIMAL_RE.fullmatch(token):
        raise PullRequestParseError(token)
    number = int(token)
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise PullRequestParseError(token)
    return number
