"""Slack integration: Socket Mode connection, event routing, and extraction."""

from koko.slack.app import SlackBot
from koko.slack.dispatcher import MessageDispatcher
from koko.slack.extractor import GatewaySchemaChange, extract_gateway_schema_change

__all__ = ["GatewaySchemaChange", "MessageDispatcher", "SlackBot", "extract_gateway_schema_change"]
