"""Group registry — the single owner of group and membership state.

The registry keeps three maps:

* group id -> ``GroupSnapshot`` (the group and its ordered member list)
* channel id -> group id (the membership index used by the relay)
* endpoint id -> channel id (used to recognise the relay's own posts)

All three are guarded by one lock.  Critical sections are short, do no
I/O and never await, so the registry can be shared by threads and asyncio
tasks alike.  Stored groups are immutable snapshots that are replaced on
every link, so readers get a consistent value without copying.

State is volatile: it lives for the process lifetime only.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from chatlink.models.groups import GroupMember, GroupSnapshot

logger = logging.getLogger(__name__)


class RegistryError(RuntimeError):
    """Base class for rejected registry mutations."""


class GroupAlreadyExistsError(RegistryError):
    """Raised when creating a group whose id is already taken."""

    def __init__(self, group_id: str) -> None:
        super().__init__(f"Group '{group_id}' already exists.")
        self.group_id = group_id


class GroupNotFoundError(RegistryError):
    """Raised when linking a channel into a group that does not exist."""

    def __init__(self, group_id: str) -> None:
        super().__init__(f"Group '{group_id}' does not exist.")
        self.group_id = group_id


class ChannelAlreadyLinkedError(RegistryError):
    """Raised when a channel is already linked into a group."""

    def __init__(self, channel_id: str, group_id: str) -> None:
        super().__init__(
            f"Channel '{channel_id}' is already linked to group '{group_id}'."
        )
        self.channel_id = channel_id
        self.group_id = group_id


class GroupRegistry:
    """Thread- and task-safe store of groups and channel memberships.

    Examples
    --------
    >>> registry = GroupRegistry()
    >>> _ = registry.create_group("lounge", "Lounge", "chat", "user1")
    >>> _ = registry.link_channel("lounge", "100", "hook100")
    >>> registry.lookup_group_for_channel("100")
    'lounge'
    >>> registry.lookup_group_for_channel("999") is None
    True
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._groups: dict[str, GroupSnapshot] = {}
        self._channel_groups: dict[str, str] = {}
        self._endpoint_channels: dict[str, str] = {}

    # -- Mutations ----------------------------------------------------------

    def create_group(
        self,
        group_id: str,
        title: str,
        description: str,
        owner_id: str,
    ) -> GroupSnapshot:
        """Create an empty group.

        Raises
        ------
        GroupAlreadyExistsError
            If *group_id* is already registered.  The existing group is
            left unmodified.
        """
        with self._lock:
            if group_id in self._groups:
                raise GroupAlreadyExistsError(group_id)
            group = GroupSnapshot(
                group_id=group_id,
                title=title,
                description=description,
                owner_id=owner_id,
            )
            self._groups[group_id] = group

        logger.info("Created group '%s' (owner %s).", group_id, owner_id)
        return group

    def link_channel(
        self,
        group_id: str,
        channel_id: str,
        endpoint_id: str,
    ) -> GroupSnapshot:
        """Append ``(channel_id, endpoint_id)`` to a group's members.

        The member append and the membership index insert happen inside
        one critical section: a reader sees both or neither.

        Returns
        -------
        GroupSnapshot
            The group as it stands right after the link.

        Raises
        ------
        GroupNotFoundError
            If *group_id* is not registered.
        ChannelAlreadyLinkedError
            If *channel_id* is already linked to any group.
        """
        with self._lock:
            group = self._groups.get(group_id)
            if group is None:
                raise GroupNotFoundError(group_id)
            current = self._channel_groups.get(channel_id)
            if current is not None:
                raise ChannelAlreadyLinkedError(channel_id, current)

            member = GroupMember(channel_id=channel_id, endpoint_id=endpoint_id)
            updated = group.model_copy(update={"members": group.members + (member,)})
            self._groups[group_id] = updated
            self._channel_groups[channel_id] = group_id
            self._endpoint_channels[endpoint_id] = channel_id

        logger.info(
            "Linked channel %s to group '%s' via endpoint %s (%d members).",
            channel_id,
            group_id,
            endpoint_id,
            updated.member_count,
        )
        return updated

    # -- Reads --------------------------------------------------------------

    def lookup_group_for_channel(self, channel_id: str) -> str | None:
        """Return the id of the group *channel_id* is linked to, if any."""
        with self._lock:
            return self._channel_groups.get(channel_id)

    def get_group(self, group_id: str) -> GroupSnapshot | None:
        """Return a snapshot of the group, or ``None`` if unknown."""
        with self._lock:
            return self._groups.get(group_id)

    def get_group_for_channel(self, channel_id: str) -> GroupSnapshot | None:
        """Resolve a channel to its group snapshot in one atomic read."""
        with self._lock:
            group_id = self._channel_groups.get(channel_id)
            if group_id is None:
                return None
            return self._groups[group_id]

    def list_groups(self) -> list[GroupSnapshot]:
        """Return a point-in-time snapshot of every group, sorted by id."""
        with self._lock:
            groups = list(self._groups.values())
        return sorted(groups, key=lambda g: g.group_id)

    def is_relay_endpoint(self, endpoint_id: str | None) -> bool:
        """Return ``True`` if *endpoint_id* was provisioned for a linked channel."""
        if not endpoint_id:
            return False
        with self._lock:
            return endpoint_id in self._endpoint_channels

    # -- Stats --------------------------------------------------------------

    def get_stats(self) -> dict[str, Any]:
        """Return ``groups`` and ``linked_channels`` counts."""
        with self._lock:
            return {
                "groups": len(self._groups),
                "linked_channels": len(self._channel_groups),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._groups)

    def __contains__(self, group_id: object) -> bool:
        with self._lock:
            return group_id in self._groups
