"""Shared formatting helpers for command responses.

Keeps the mention syntax and the group listing layout in one place so
every reply renders channels, users and groups the same way.
"""

from __future__ import annotations

from chatlink.models.commands import EmbedField
from chatlink.models.groups import GroupSnapshot


def channel_mention(channel_id: str) -> str:
    """Return the platform mention markup for a channel.

    Examples
    --------
    >>> channel_mention("915230411259523103")
    '<#915230411259523103>'
    """
    return f"<#{channel_id}>"


def user_mention(user_id: str) -> str:
    return f"<@{user_id}>"


def group_field(group: GroupSnapshot) -> EmbedField:
    """Render one group as a listing entry.

    The entry shows the id, title, description, member count and owner.
    """
    return EmbedField(
        name=f"`{group.group_id}` {group.title}",
        value=(
            f"```{group.description}```"
            f"{group.member_count} channels linked\n"
            f"By {user_mention(group.owner_id)}"
        ),
        inline=False,
    )
