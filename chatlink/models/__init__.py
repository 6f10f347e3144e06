"""chatlink data models — all Pydantic v2, all frozen (immutable)."""

from chatlink.models.commands import CommandInvocation, CommandResponse, EmbedField
from chatlink.models.groups import GroupMember, GroupSnapshot
from chatlink.models.messages import (
    DeliveryOutcome,
    DeliveryPayload,
    DeliveryStatus,
    InboundMessage,
    RelayReport,
)

__all__ = [
    "CommandInvocation",
    "CommandResponse",
    "DeliveryOutcome",
    "DeliveryPayload",
    "DeliveryStatus",
    "EmbedField",
    "GroupMember",
    "GroupSnapshot",
    "InboundMessage",
    "RelayReport",
]
