"""Command surface — administrator commands mapped onto the group registry.

Each command maps to a registry operation and renders its outcome as a
``CommandResponse``.  Registry and delivery errors are translated into
user-visible replies here and nowhere else.
"""

from __future__ import annotations

import logging
import re

from chatlink.commands._formatting import channel_mention, group_field
from chatlink.commands.definitions import LINK_COMMAND, LIST_COMMAND, NEW_COMMAND
from chatlink.core.registry import (
    ChannelAlreadyLinkedError,
    GroupAlreadyExistsError,
    GroupNotFoundError,
    GroupRegistry,
    RegistryError,
)
from chatlink.delivery import DeliveryError, EndpointProvisioner
from chatlink.models.commands import CommandInvocation, CommandResponse

logger = logging.getLogger(__name__)

GROUP_ID_PATTERN = re.compile(r"^[a-z0-9_-]+$")


class MissingOptionError(ValueError):
    """Raised when a required command option is absent or empty."""

    def __init__(self, option: str) -> None:
        super().__init__(f"Missing option `{option}`")
        self.option = option


def _ephemeral(content: str) -> CommandResponse:
    return CommandResponse(content=content, ephemeral=True)


def _require(invocation: CommandInvocation, option: str) -> str:
    value = invocation.options.get(option, "")
    if not value:
        raise MissingOptionError(option)
    return value


class CommandSurface:
    """Handles ``new``, ``link`` and ``list`` commands.

    Parameters
    ----------
    registry:
        The shared ``GroupRegistry``.
    provisioner:
        Creates a delivery endpoint for each channel being linked.
    endpoint_name:
        Display name given to provisioned endpoints.
    """

    def __init__(
        self,
        registry: GroupRegistry,
        provisioner: EndpointProvisioner,
        *,
        endpoint_name: str = "Chat linker",
    ) -> None:
        self._registry = registry
        self._provisioner = provisioner
        self._endpoint_name = endpoint_name

    async def handle(self, invocation: CommandInvocation) -> CommandResponse:
        """Dispatch *invocation* to its command handler."""
        if invocation.guild_id is None:
            return CommandResponse(content="This can only be called on a server")

        try:
            if invocation.name == NEW_COMMAND:
                return self.create_group(invocation)
            if invocation.name == LINK_COMMAND:
                return await self.link_channel(invocation)
            if invocation.name == LIST_COMMAND:
                return self.list_groups()
        except MissingOptionError as exc:
            return _ephemeral(str(exc))

        logger.warning("Unknown command '%s' from user %s", invocation.name, invocation.user_id)
        return _ephemeral("Unknown interaction")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_group(self, invocation: CommandInvocation) -> CommandResponse:
        group_id = _require(invocation, "link_id")
        title = _require(invocation, "title")
        description = _require(invocation, "description")

        if not GROUP_ID_PATTERN.match(group_id):
            return _ephemeral(
                f"Link id `{group_id}` is invalid, it can only contain [a-z0-9-_]"
            )

        try:
            self._registry.create_group(group_id, title, description, invocation.user_id)
        except GroupAlreadyExistsError:
            return _ephemeral(
                f"Link {group_id} is already used, please choose another name"
            )
        return _ephemeral(f"Link `{group_id}` successfully created")

    async def link_channel(self, invocation: CommandInvocation) -> CommandResponse:
        """Provision an endpoint for the channel, then link it.

        The group and the channel are checked before provisioning so a
        doomed request does not create an endpoint.  If the registry still
        rejects the link (a concurrent command won the race), the fresh
        endpoint is deleted again.
        """
        if not invocation.can_manage_channels:
            return _ephemeral(
                "Insufficient permission, this command requires the manage channel permission"
            )

        group_id = _require(invocation, "link_id")
        channel_id = _require(invocation, "channel")

        if group_id not in self._registry:
            return _ephemeral(f"Link {group_id} doesn't exist!")
        current = self._registry.lookup_group_for_channel(channel_id)
        if current is not None:
            return _ephemeral(self._already_linked(channel_id, current))

        try:
            endpoint_id = await self._provisioner.create_endpoint(
                channel_id, self._endpoint_name
            )
        except DeliveryError as exc:
            logger.error("Failed to provision endpoint for channel %s: %s", channel_id, exc)
            return _ephemeral(
                f"Failed to create a webhook in {channel_mention(channel_id)}, "
                "make sure the bot can manage webhooks there"
            )

        try:
            self._registry.link_channel(group_id, channel_id, endpoint_id)
        except RegistryError as exc:
            await self._discard_endpoint(endpoint_id)
            if isinstance(exc, GroupNotFoundError):
                return _ephemeral(f"Link {group_id} doesn't exist!")
            if isinstance(exc, ChannelAlreadyLinkedError):
                return _ephemeral(self._already_linked(channel_id, exc.group_id))
            raise

        return _ephemeral(
            f"Successfully linked channel {channel_mention(channel_id)} to `{group_id}`"
        )

    def list_groups(self) -> CommandResponse:
        groups = self._registry.list_groups()
        return CommandResponse(
            embed_title="Public links",
            embed_fields=tuple(group_field(g) for g in groups),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _already_linked(channel_id: str, group_id: str) -> str:
        return f"Channel {channel_mention(channel_id)} is already linked to `{group_id}`"

    async def _discard_endpoint(self, endpoint_id: str) -> None:
        try:
            await self._provisioner.delete_endpoint(endpoint_id)
        except DeliveryError as exc:
            logger.warning("Failed to delete unused endpoint %s: %s", endpoint_id, exc)
