"""Delivery endpoint protocols for chatlink relaying.

A delivery endpoint is a pre-provisioned object (a webhook on Discord)
that can post into one channel under an arbitrary display name and
avatar.  The relay engine only depends on these protocols; concrete
clients live in :mod:`chatlink.delivery.discord` and
:mod:`chatlink.delivery.memory`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from chatlink.models.messages import DeliveryPayload


class DeliveryError(RuntimeError):
    """Raised when resolving, invoking or provisioning an endpoint fails."""

    def __init__(
        self,
        message: str,
        *,
        endpoint_id: str = "",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.endpoint_id = endpoint_id
        self.status_code = status_code


@runtime_checkable
class DeliveryHandle(Protocol):
    """A live endpoint that can post one message into its channel."""

    @property
    def endpoint_id(self) -> str:
        """Return the identifier of the endpoint behind this handle."""
        ...

    async def execute(self, payload: DeliveryPayload) -> None:
        """Post *payload* into the endpoint's channel.

        Raises
        ------
        DeliveryError
            If the platform rejects the post or the transport fails.
        """
        ...


@runtime_checkable
class EndpointResolver(Protocol):
    """Turns a stored endpoint id into a live :class:`DeliveryHandle`."""

    async def resolve(self, endpoint_id: str) -> DeliveryHandle:
        """Fetch the endpoint.  May raise ``DeliveryError`` per call."""
        ...


@runtime_checkable
class EndpointProvisioner(Protocol):
    """Creates and removes delivery endpoints for channels."""

    async def create_endpoint(self, channel_id: str, name: str) -> str:
        """Provision a fresh endpoint in *channel_id* and return its id."""
        ...

    async def delete_endpoint(self, endpoint_id: str) -> None:
        """Remove an endpoint that is no longer needed."""
        ...


__all__ = [
    "DeliveryError",
    "DeliveryHandle",
    "EndpointProvisioner",
    "EndpointResolver",
]
