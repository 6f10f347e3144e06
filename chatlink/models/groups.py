"""Group and membership models — immutable registry snapshots."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class GroupMember(BaseModel):
    """One linked channel and the delivery endpoint provisioned for it."""

    model_config = ConfigDict(frozen=True)

    channel_id: str
    endpoint_id: str


class GroupSnapshot(BaseModel):
    """Point-in-time copy of a group and its member list.

    Snapshots are values: a link applied after the snapshot was taken is
    not reflected in it.
    """

    model_config = ConfigDict(frozen=True)

    group_id: str
    title: str
    description: str = ""
    owner_id: str
    members: tuple[GroupMember, ...] = ()
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def member_count(self) -> int:
        return len(self.members)

    def has_channel(self, channel_id: str) -> bool:
        return any(m.channel_id == channel_id for m in self.members)

    def target_members(self, source_channel_id: str) -> list[GroupMember]:
        """Return every member except the one for *source_channel_id*."""
        return [m for m in self.members if m.channel_id != source_channel_id]
