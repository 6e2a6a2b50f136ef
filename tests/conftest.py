"""Shared test fixtures for the koko test suite.

The _isolate_environment fixture (autouse) prevents KokoConfig from reading
real credentials from the developer's environment or a .env file in the
working directory.
"""

from __future__ import annotations

import pytest

from koko.config.schema import KokoConfig
from koko.slack.events import Attachment, AttachmentField, InboundMessage

_ENV_VARS = (
    "SLACK_APP_TOKEN",
    "SLACK_BOT_TOKEN",
    "GITHUB_TOKEN",
    "KOKO_DEBUG",
    "KOKO_GITHUB_API_URL",
    "KOKO_BUILD_COMMIT",
    "KOKO_BUILD_DATE",
)

REF_VALUE = "refs/pull/5291/merge"
COMMIT_VALUE = "https://github.com/kong/team-koko-bot/commit/180edc|180edc"


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setitem(KokoConfig.model_config, "env_file", None)


def _make_message(
    *,
    bot_id: str = "B0CHANGEFEED",
    subtype: str = "bot_message",
    channel: str = "C0FEED",
    author_name: str = "team-koko-bot",
    fields: list[tuple[str, str]] | None = None,
    attachments: tuple[Attachment, ...] | None = None,
    user: str = "",
    text: str = "",
) -> InboundMessage:
    """Build a change feed message; defaults describe a valid schema change."""
    if attachments is None:
        if fields is None:
            fields = [("Ref", REF_VALUE), ("Commit", COMMIT_VALUE)]
        attachments = (
            Attachment(
                author_name=author_name,
                fields=tuple(AttachmentField(title=t, value=v) for t, v in fields),
            ),
        )
    return InboundMessage(
        channel=channel,
        user=user,
        text=text,
        subtype=subtype,
        bot_id=bot_id,
        attachments=attachments,
    )


@pytest.fixture
def make_message():
    """Factory for change feed messages."""
    return _make_message


@pytest.fixture
def change_feed_message() -> InboundMessage:
    return _make_message()
