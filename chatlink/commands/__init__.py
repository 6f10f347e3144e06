"""Administrator command surface.

Translates host-platform commands (``new``, ``link``, ``list``) into
group registry operations and renders their outcomes.
"""

from chatlink.commands.definitions import (
    LINK_COMMAND,
    LIST_COMMAND,
    NEW_COMMAND,
    build_command_definitions,
)
from chatlink.commands.surface import CommandSurface, MissingOptionError

__all__ = [
    "CommandSurface",
    "LINK_COMMAND",
    "LIST_COMMAND",
    "MissingOptionError",
    "NEW_COMMAND",
    "build_command_definitions",
]
