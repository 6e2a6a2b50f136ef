"""Slack event types consumed by the dispatcher.

Socket Mode delivers a generic envelope. `parse_request()` turns it into
one of a closed set of event kinds so the dispatcher can match on the
concrete shape instead of probing dictionaries:

- MessageEvent: an events-API envelope carrying a `message` event
- ApiEvent: an events-API envelope carrying any other event
- UnsupportedRequest: anything that is not an events-API envelope
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

EVENTS_API_REQUEST = "events_api"
MESSAGE_EVENT = "message"
BOT_MESSAGE_SUBTYPE = "bot_message"
GATEWAY_SCHEMA_CHANGE_CHANNEL = "gateway-schema-change-feed"


@dataclass(frozen=True, slots=True)
class AttachmentField:
    """A title/value pair inside a message attachment."""

    title: str
    value: str


@dataclass(frozen=True, slots=True)
class Attachment:
    """A structured block within a message."""

    author_name: str = ""
    fields: tuple[AttachmentField, ...] = ()

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Attachment:
        return cls(
            author_name=payload.get("author_name") or "",
            fields=tuple(
                AttachmentField(title=f.get("title") or "", value=f.get("value") or "")
                for f in payload.get("fields") or ()
            ),
        )


@dataclass(frozen=True, slots=True)
class InboundMessage:
    """One chat message as delivered by Slack.

    `subtype` is empty for a new message posted by a person. `bot_id` is
    empty unless an app or integration authored the message.
    """

    channel: str
    user: str = ""
    text: str = ""
    subtype: str = ""
    bot_id: str = ""
    ts: str = ""
    attachments: tuple[Attachment, ...] = ()

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> InboundMessage:
        return cls(
            channel=payload.get("channel") or "",
            user=payload.get("user") or "",
            text=payload.get("text") or "",
            subtype=payload.get("subtype") or "",
            bot_id=payload.get("bot_id") or "",
            ts=payload.get("ts") or "",
            attachments=tuple(
                Attachment.from_payload(a) for a in payload.get("attachments") or ()
            ),
        )


@dataclass(frozen=True, slots=True)
class MessageEvent:
    envelope_id: str
    message: InboundMessage


@dataclass(frozen=True, slots=True)
class ApiEvent:
    envelope_id: str
    event_type: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class UnsupportedRequest:
    envelope_id: str
    request_type: str


SlackEvent = MessageEvent | ApiEvent | UnsupportedRequest


def parse_request(request_type: str, envelope_id: str, payload: dict[str, Any]) -> SlackEvent:
    """Classify a Socket Mode request by its type and inner event."""
    if request_type != EVENTS_API_REQUEST:
        return UnsupportedRequest(envelope_id=envelope_id, request_type=request_type)

    event = payload.get("event") or {}
    event_type = event.get("type") or ""
    if event_type == MESSAGE_EVENT:
        return MessageEvent(envelope_id=envelope_id, message=InboundMessage.from_payload(event))
    return ApiEvent(envelope_id=envelope_id, event_type=event_type, payload=event)
