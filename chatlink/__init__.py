"""chatlink: relay messages across channels linked into named groups.

Messages posted in one channel of a group are re-posted into every other
channel of the group through per-channel webhooks, under the original
author's name and avatar.

  - GroupRegistry: volatile, lock-guarded store of groups and memberships
  - RelayEngine: concurrent fan-out with per-endpoint failure isolation
  - CommandSurface: ``new`` / ``link`` / ``list`` administrator commands
  - DiscordRestClient: httpx-based webhook delivery and provisioning
"""

__version__ = "0.1.0"
__description__ = "Relay messages across channels linked into named groups"

from chatlink.commands.surface import CommandSurface
from chatlink.core.registry import GroupRegistry
from chatlink.core.relay import RelayEngine

__all__ = ["CommandSurface", "GroupRegistry", "RelayEngine", "__version__"]
