"""Command surface models — host-platform invocations and rendered replies."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CommandInvocation(BaseModel):
    """An administrator command as delivered by the host platform.

    ``guild_id`` is ``None`` for direct messages.  ``can_manage_channels``
    carries the host platform's own permission verdict for the invoking
    member; the relay does not compute permissions itself.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    user_id: str
    guild_id: str | None = None
    can_manage_channels: bool = False
    options: dict[str, str] = {}


class EmbedField(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    inline: bool = False


class CommandResponse(BaseModel):
    """A reply to render back to the invoking user."""

    model_config = ConfigDict(frozen=True)

    content: str = ""
    ephemeral: bool = False
    embed_title: str = ""
    embed_fields: tuple[EmbedField, ...] = ()
