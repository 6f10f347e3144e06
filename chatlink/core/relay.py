"""Relay engine — fans one inbound message out to every sibling channel.

Every relayed message is delivered to all other channels of its group
concurrently.  A failing endpoint (revoked webhook, rate limit, timeout)
is logged and recorded in the report but never blocks, cancels or fails
delivery to the remaining channels, and never reaches the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from chatlink.core.registry import GroupRegistry
from chatlink.delivery import EndpointResolver
from chatlink.models.groups import GroupMember
from chatlink.models.messages import (
    DeliveryOutcome,
    DeliveryPayload,
    DeliveryStatus,
    InboundMessage,
    RelayReport,
)

logger = logging.getLogger(__name__)

SKIP_AUTOMATED = "automated"
SKIP_RELAY_ECHO = "relay_echo"
SKIP_UNLINKED = "unlinked"
SKIP_NO_TARGETS = "no_targets"


class RelayEngine:
    """Relays inbound messages across linked channels.

    The engine is stateless between calls: group membership is read from
    the registry once per message, and the registry read completes before
    any endpoint is contacted.

    Usage
    -----
    >>> engine = RelayEngine(registry, resolver)
    >>> report = await engine.relay(message)
    >>> [o.channel_id for o in report.failed]
    []
    """

    def __init__(self, registry: GroupRegistry, resolver: EndpointResolver) -> None:
        self._registry = registry
        self._resolver = resolver

    # ------------------------------------------------------------------
    # Relay
    # ------------------------------------------------------------------

    async def relay(self, message: InboundMessage) -> RelayReport:
        """Deliver *message* to every other channel in its group.

        Returns only after every delivery attempt has finished.  Never
        raises for delivery failures; they are reported in the returned
        ``RelayReport`` and logged.
        """
        if message.is_automated:
            return self._skip(message, SKIP_AUTOMATED)
        if self._registry.is_relay_endpoint(message.webhook_id):
            return self._skip(message, SKIP_RELAY_ECHO)

        group = self._registry.get_group_for_channel(message.channel_id)
        if group is None:
            return self._skip(message, SKIP_UNLINKED)

        targets = group.target_members(message.channel_id)
        if not targets:
            return self._skip(message, SKIP_NO_TARGETS, group_id=group.group_id)

        payload = DeliveryPayload.from_message(message)
        outcomes = await asyncio.gather(
            *(self._deliver(member, payload) for member in targets)
        )

        report = RelayReport(
            message_id=message.message_id,
            source_channel_id=message.channel_id,
            group_id=group.group_id,
            outcomes=tuple(outcomes),
        )
        if report.failed:
            logger.info(
                "Message %s in group '%s': %d/%d deliveries succeeded, %d failed",
                message.message_id,
                group.group_id,
                len(report.delivered),
                report.attempted,
                len(report.failed),
            )
        else:
            logger.debug(
                "Message %s relayed to %d channel(s) in group '%s'",
                message.message_id,
                report.attempted,
                group.group_id,
            )
        return report

    async def relay_many(self, messages: Iterable[InboundMessage]) -> list[RelayReport]:
        """Relay several messages concurrently, returning reports in input order."""
        return list(await asyncio.gather(*(self.relay(m) for m in messages)))

    # ------------------------------------------------------------------
    # Per-target delivery
    # ------------------------------------------------------------------

    async def _deliver(
        self, member: GroupMember, payload: DeliveryPayload
    ) -> DeliveryOutcome:
        """Resolve and execute one endpoint; failures become outcomes."""
        try:
            handle = await self._resolver.resolve(member.endpoint_id)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Failed to resolve endpoint %s of channel %s: %s",
                member.endpoint_id,
                member.channel_id,
                exc,
            )
            return self._outcome(member, DeliveryStatus.RESOLVE_FAILED, exc)

        try:
            await handle.execute(payload)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Delivery to channel %s via endpoint %s failed: %s",
                member.channel_id,
                member.endpoint_id,
                exc,
            )
            return self._outcome(member, DeliveryStatus.DELIVERY_FAILED, exc)

        return self._outcome(member, DeliveryStatus.DELIVERED)

    @staticmethod
    def _outcome(
        member: GroupMember,
        status: DeliveryStatus,
        exc: Exception | None = None,
    ) -> DeliveryOutcome:
        return DeliveryOutcome(
            channel_id=member.channel_id,
            endpoint_id=member.endpoint_id,
            status=status,
            error=f"{type(exc).__name__}: {exc}" if exc is not None else "",
        )

    @staticmethod
    def _skip(
        message: InboundMessage, reason: str, group_id: str | None = None
    ) -> RelayReport:
        logger.debug("Message %s not relayed: %s", message.message_id, reason)
        return RelayReport(
            message_id=message.message_id,
            source_channel_id=message.channel_id,
            group_id=group_id,
            skipped_reason=reason,
        )
