"""Route inbound Slack events to the handlers that act on them.

The dispatcher is the error boundary for a single event: lookups,
extraction, and GitHub failures are logged and the event is dropped.
Nothing raised while handling one event affects the next.
"""

from __future__ import annotations

import asyncio

from aiohttp import ClientError
from loguru import logger
from slack_sdk.errors import SlackClientError
from slack_sdk.web.async_client import AsyncWebClient

from koko.errors import DispatchError
from koko.github.client import GitHubClient
from koko.github.exceptions import GitHubError
from koko.slack.events import (
    BOT_MESSAGE_SUBTYPE,
    GATEWAY_SCHEMA_CHANGE_CHANNEL,
    ApiEvent,
    InboundMessage,
    MessageEvent,
    SlackEvent,
    UnsupportedRequest,
)
from koko.slack.extractor import (
    ExtractionError,
    GatewaySchemaChange,
    extract_gateway_schema_change,
)

# Errors a Web API lookup can raise
_LOOKUP_ERRORS = (SlackClientError, ClientError, asyncio.TimeoutError, KeyError, TypeError)


class MessageDispatcher:
    """Classify message events and hand qualifying ones to their handler.

    `bot_id` is this application's own bot identifier, resolved once at
    startup and only read afterwards, so one dispatcher can serve
    concurrent handler invocations.
    """

    def __init__(self, bot_id: str, web_client: AsyncWebClient, github: GitHubClient) -> None:
        self._bot_id = bot_id
        self._web = web_client
        self._github = github
        self._log = logger.bind(component="slack")

    @property
    def bot_id(self) -> str:
        return self._bot_id

    async def dispatch(self, event: SlackEvent) -> None:
        match event:
            case MessageEvent(message=message):
                await self.handle_message(message)
            case ApiEvent(event_type=event_type):
                self._log.debug("Event ignored as it is not a message event: {}", event_type)
            case UnsupportedRequest(request_type=request_type):
                self._log.error("Event ignored as it is not an API event: {}", request_type)

    async def handle_message(self, message: InboundMessage) -> None:
        """Process one message event; never raises."""
        if message.subtype and message.subtype != BOT_MESSAGE_SUBTYPE:
            self._log.debug(
                "Event ignored as the sub-type is not a new message: {}", message.subtype
            )
            return
        if message.bot_id and message.bot_id == self._bot_id:
            self._log.debug(
                "Event ignored as the message originated from our application: {}",
                message.bot_id,
            )
            return

        channel_name = await self._channel_name(message.channel)
        if channel_name is None:
            return

        if message.subtype == BOT_MESSAGE_SUBTYPE:
            try:
                await self.handle_bot_message(message, channel_name)
            except DispatchError as exc:
                self._log.error("Unable to handle bot message in #{}: {}", channel_name, exc)
            return

        username = await self._username(message.user)
        if username is None:
            return
        self._log.debug(
            "Message received (channel={}, username={}): {}", channel_name, username, message.text
        )

    async def handle_bot_message(self, message: InboundMessage, channel_name: str) -> None:
        """Act on a bot-authored message according to its channel.

        Raises:
            DispatchError: extraction or the pull request lookup failed.
        """
        if channel_name != GATEWAY_SCHEMA_CHANGE_CHANNEL:
            self._log.debug(
                "Bot message received (bot-id={}, channel={})", message.bot_id, channel_name
            )
            return

        try:
            change = self.handle_gateway_schema_change(message)
        except ExtractionError as exc:
            raise DispatchError(f"unable to handle gateway schema change event: {exc}") from exc

        try:
            # TODO: hand the description to the Jira integration once it exists
            await self._github.pr_description(
                change.organization, change.repository, change.pull_request
            )
        except GitHubError as exc:
            raise DispatchError(
                f"unable to get PR description for gateway schema change event: {exc}"
            ) from exc

    def handle_gateway_schema_change(self, message: InboundMessage) -> GatewaySchemaChange:
        self._log.debug("Gateway change event received: {}", message)
        change = extract_gateway_schema_change(message)
        self._log.info(
            "Gateway schema change in {}/{} (pull request #{})",
            change.organization,
            change.repository,
            change.pull_request,
        )
        return change

    async def _channel_name(self, channel_id: str) -> str | None:
        try:
            response = await self._web.conversations_info(channel=channel_id)
            return response["channel"]["name"]
        except _LOOKUP_ERRORS as exc:
            self._log.error("Unable to get channel information for {}: {}", channel_id, exc)
            return None

    async def _username(self, user_id: str) -> str | None:
        try:
            response = await self._web.users_info(user=user_id)
            return response["user"]["name"]
        except _LOOKUP_ERRORS as exc:
            self._log.error("Unable to get user information for {}: {}", user_id, exc)
            return None
