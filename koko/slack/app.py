"""Slack bot using slack-sdk Socket Mode.

Socket Mode needs no public URL: the bot connects outbound to Slack over a
WebSocket. Two tokens are required:
  SLACK_APP_TOKEN = "xapp-..."  (app-level token, opens the socket)
  SLACK_BOT_TOKEN = "xoxb-..."  (bot token, Web API lookups)
"""

from __future__ import annotations

import asyncio

from aiohttp import ClientError
from loguru import logger
from slack_sdk.errors import SlackClientError
from slack_sdk.socket_mode.aiohttp import SocketModeClient
from slack_sdk.socket_mode.async_client import AsyncBaseSocketModeClient
from slack_sdk.socket_mode.request import SocketModeRequest
from slack_sdk.socket_mode.response import SocketModeResponse
from slack_sdk.web.async_client import AsyncWebClient

from koko.errors import ConfigError, SlackStartupError
from koko.github.client import GitHubClient
from koko.logging import bridge_logger
from koko.slack.dispatcher import MessageDispatcher
from koko.slack.events import UnsupportedRequest, parse_request

APP_TOKEN_PREFIX = "xapp-"
BOT_TOKEN_PREFIX = "xoxb-"


def validate_tokens(app_token: str, bot_token: str) -> None:
    """Check that both Slack tokens are present and of the right type."""
    if not app_token.strip():
        raise ConfigError("slack application token is not set")
    if not app_token.startswith(APP_TOKEN_PREFIX):
        raise ConfigError(f"slack application token must have the prefix '{APP_TOKEN_PREFIX}'")
    if not bot_token.strip():
        raise ConfigError("slack bot token is not set")
    if not bot_token.startswith(BOT_TOKEN_PREFIX):
        raise ConfigError(f"slack bot token must have the prefix '{BOT_TOKEN_PREFIX}'")


class SlackBot:
    """Socket Mode connection that feeds message events to the dispatcher."""

    def __init__(
        self,
        app_token: str,
        bot_token: str,
        github: GitHubClient,
        *,
        debug: bool = False,
        web_client: AsyncWebClient | None = None,
    ) -> None:
        validate_tokens(app_token, bot_token)

        self._app_token = app_token
        self._github = github
        self._debug = debug
        self._log = logger.bind(component="slack")
        self._web = web_client or AsyncWebClient(
            token=bot_token,
            logger=bridge_logger("koko.slack.api", "api", debug=debug),
        )
        self._socket: SocketModeClient | None = None
        self._dispatcher: MessageDispatcher | None = None
        self._stopped = asyncio.Event()

    @property
    def dispatcher(self) -> MessageDispatcher | None:
        return self._dispatcher

    async def identify(self) -> MessageDispatcher:
        """Resolve this app's bot ID and build the dispatcher around it."""
        try:
            response = await self._web.auth_test()
        except (SlackClientError, ClientError) as exc:
            raise SlackStartupError(f"unable to determine bot ID: {exc}") from exc

        bot_id = response.get("bot_id") or ""
        if not bot_id:
            raise SlackStartupError("unable to determine bot ID: auth.test returned no bot_id")

        self._log.info("Authenticated as bot {}", bot_id)
        self._dispatcher = MessageDispatcher(bot_id, self._web, self._github)
        return self._dispatcher

    async def run(self) -> None:
        """Connect to Slack and process events until stop() is called."""
        await self.identify()

        self._socket = SocketModeClient(
            app_token=self._app_token,
            web_client=self._web,
            logger=bridge_logger("koko.slack.socketmode", "socketmode", debug=self._debug),
        )
        self._socket.socket_mode_request_listeners.append(self.handle_request)
        self._socket.message_listeners.append(self.handle_frame)

        self._log.info("Connecting to Slack with Socket Mode")
        try:
            await self._socket.connect()
        except (SlackClientError, ClientError, OSError) as exc:
            await self._socket.close()
            raise SlackStartupError(f"error running handler event loop: {exc}") from exc
        self._log.info("Connected to Slack with Socket Mode")

        try:
            await self._stopped.wait()
        finally:
            await self._socket.close()
            self._log.info("Disconnected from Slack")

    def stop(self) -> None:
        self._stopped.set()

    async def handle_request(
        self, client: AsyncBaseSocketModeClient, req: SocketModeRequest
    ) -> None:
        """Acknowledge and dispatch a single Socket Mode request.

        Events-API envelopes are acknowledged before any processing, as
        Slack redelivers unacknowledged events. Nothing raised here reaches
        the socket loop.
        """
        event = parse_request(req.type, req.envelope_id, req.payload or {})
        if not isinstance(event, UnsupportedRequest):
            try:
                await client.send_socket_mode_response(
                    SocketModeResponse(envelope_id=req.envelope_id)
                )
            except Exception:
                self._log.exception("Unable to acknowledge event {}", req.envelope_id)

        if self._dispatcher is None:
            self._log.warning("Event {} received before the bot was identified", req.envelope_id)
            return

        try:
            await self._dispatcher.dispatch(event)
        except Exception:
            self._log.exception("Unexpected failure while handling event {}", req.envelope_id)

    async def handle_frame(
        self, client: AsyncBaseSocketModeClient, message: dict, raw_message: str | None
    ) -> None:
        """Log connection lifecycle frames sent by Slack over the socket."""
        match message.get("type"):
            case "hello":
                self._log.info("Received hello event")
            case "disconnect":
                self._log.warning(
                    "Connection failed; retrying connection (reason={})",
                    message.get("reason", "unknown"),
                )
