"""Inbound message events, outbound delivery payloads and relay reports."""

from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class InboundMessage(BaseModel):
    """A message event handed over by the gateway adapter.

    ``is_automated`` must be set for every message authored by a bot or
    system account, including this relay's own webhook posts.  The relay
    drops tagged messages so a relayed message is never relayed again.
    """

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    channel_id: str
    author_display_name: str
    author_avatar_url: str | None = None
    content: str
    is_automated: bool = False
    webhook_id: str | None = None  # set when the platform saw a webhook post


class DeliveryPayload(BaseModel):
    """What a delivery endpoint posts: the body under the author's identity."""

    model_config = ConfigDict(frozen=True)

    content: str
    username: str
    avatar_url: str | None = None

    @classmethod
    def from_message(cls, message: InboundMessage) -> DeliveryPayload:
        return cls(
            content=message.content,
            username=message.author_display_name,
            avatar_url=message.author_avatar_url,
        )


class DeliveryStatus(str, Enum):
    """Outcome of one per-target delivery attempt."""

    DELIVERED = "delivered"
    RESOLVE_FAILED = "resolve_failed"
    DELIVERY_FAILED = "delivery_failed"


class DeliveryOutcome(BaseModel):
    """Result of delivering one relayed message to one sibling channel."""

    model_config = ConfigDict(frozen=True)

    channel_id: str
    endpoint_id: str
    status: DeliveryStatus
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status is DeliveryStatus.DELIVERED


class RelayReport(BaseModel):
    """Observability record of a single relay call.

    ``skipped_reason`` is empty when a fan-out happened, otherwise one of
    ``automated``, ``relay_echo``, ``unlinked`` or ``no_targets``.
    """

    model_config = ConfigDict(frozen=True)

    message_id: str
    source_channel_id: str
    group_id: str | None = None
    skipped_reason: str = ""
    outcomes: tuple[DeliveryOutcome, ...] = ()

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def delivered(self) -> list[DeliveryOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[DeliveryOutcome]:
        return [o for o in self.outcomes if not o.ok]
