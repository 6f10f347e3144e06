"""In-memory delivery client — records deliveries instead of posting them.

This client does NOT perform network I/O.  It provisions sequential
endpoint ids, records every executed payload in ``deliveries`` and can
simulate failing endpoints, which makes it the transport for the CLI demo
and for tests.
"""

from __future__ import annotations

import asyncio
import itertools
import logging

from chatlink.delivery import DeliveryError
from chatlink.models.messages import DeliveryPayload

logger = logging.getLogger(__name__)


class InMemoryHandle:
    """Delivery handle that appends to its owning client's buffer."""

    def __init__(self, client: InMemoryDeliveryClient, endpoint_id: str) -> None:
        self._client = client
        self._endpoint_id = endpoint_id

    @property
    def endpoint_id(self) -> str:
        return self._endpoint_id

    async def execute(self, payload: DeliveryPayload) -> None:
        await self._client._pause()
        if self._endpoint_id in self._client.fail_execute:
            raise DeliveryError(
                f"Simulated delivery failure for endpoint {self._endpoint_id}",
                endpoint_id=self._endpoint_id,
            )
        self._client.deliveries.append((self._endpoint_id, payload))
        logger.debug("InMemoryHandle: recorded delivery to %s", self._endpoint_id)


class InMemoryDeliveryClient:
    """Resolver and provisioner backed by plain Python containers.

    Parameters
    ----------
    latency:
        Seconds each resolve and execute call sleeps for.  Zero still
        yields to the event loop once, so deliveries interleave.
    endpoint_prefix:
        Prefix for provisioned endpoint ids (``hook1``, ``hook2``...).

    Attributes
    ----------
    deliveries:
        ``(endpoint_id, payload)`` pairs in completion order.
    fail_resolve / fail_execute:
        Endpoint ids whose resolve or execute call raises ``DeliveryError``.
    """

    def __init__(self, latency: float = 0.0, endpoint_prefix: str = "hook") -> None:
        self.latency = latency
        self.endpoint_prefix = endpoint_prefix
        self.deliveries: list[tuple[str, DeliveryPayload]] = []
        self.fail_resolve: set[str] = set()
        self.fail_execute: set[str] = set()
        self.endpoints: dict[str, str] = {}  # endpoint id -> channel id
        self.resolve_calls: list[str] = []
        self._counter = itertools.count(1)

    async def _pause(self) -> None:
        await asyncio.sleep(self.latency)

    # -- EndpointResolver ---------------------------------------------------

    async def resolve(self, endpoint_id: str) -> InMemoryHandle:
        self.resolve_calls.append(endpoint_id)
        await self._pause()
        if endpoint_id in self.fail_resolve:
            raise DeliveryError(
                f"Simulated resolve failure for endpoint {endpoint_id}",
                endpoint_id=endpoint_id,
            )
        return InMemoryHandle(self, endpoint_id)

    # -- EndpointProvisioner ------------------------------------------------

    async def create_endpoint(self, channel_id: str, name: str) -> str:
        endpoint_id = f"{self.endpoint_prefix}{next(self._counter)}"
        self.endpoints[endpoint_id] = channel_id
        logger.debug(
            "InMemoryDeliveryClient: provisioned %s (%s) for channel %s",
            endpoint_id,
            name,
            channel_id,
        )
        return endpoint_id

    async def delete_endpoint(self, endpoint_id: str) -> None:
        self.endpoints.pop(endpoint_id, None)

    # -- Inspection ---------------------------------------------------------

    def delivered_to(self, endpoint_id: str) -> list[DeliveryPayload]:
        """Return every payload delivered to *endpoint_id*."""
        return [p for eid, p in self.deliveries if eid == endpoint_id]

    def flush(self) -> list[tuple[str, DeliveryPayload]]:
        """Return and clear the recorded deliveries."""
        recorded = list(self.deliveries)
        self.deliveries.clear()
        return recorded
