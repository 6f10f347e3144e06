"""Slash-command definitions registered with the host platform.

Option types follow the Discord application-command schema.
"""

from __future__ import annotations

from typing import Any

NEW_COMMAND = "new"
LINK_COMMAND = "link"
LIST_COMMAND = "list"

OPTION_STRING = 3
OPTION_CHANNEL = 7


def _option(name: str, description: str, kind: int) -> dict[str, Any]:
    return {"name": name, "description": description, "type": kind, "required": True}


def build_command_definitions() -> list[dict[str, Any]]:
    """Return the global command definitions for ``new``, ``link`` and ``list``."""
    return [
        {
            "name": NEW_COMMAND,
            "description": (
                "Create a new link to link between channels from every "
                "servers (that has this bot joined)"
            ),
            "options": [
                _option("link_id", "The link id (can be [a-z0-9-_])", OPTION_STRING),
                _option("title", "The title of this link", OPTION_STRING),
                _option("description", "The description of this link", OPTION_STRING),
            ],
        },
        {
            "name": LINK_COMMAND,
            "description": "Links a channel to a link",
            "options": [
                _option("link_id", "The link id", OPTION_STRING),
                _option("channel", "The channel you wanted to link", OPTION_CHANNEL),
            ],
        },
        {
            "name": LIST_COMMAND,
            "description": "Lists all public and available links",
        },
    ]
