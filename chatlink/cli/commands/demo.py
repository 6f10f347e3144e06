"""``chatlink demo`` — run the relay end to end against in-memory webhooks.

Creates a group through the command surface, links three channels, makes
one endpoint fail, and relays a handful of messages so the fan-out and
failure isolation can be watched without a bot token.
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel

from chatlink.cli.renderer import render_groups, render_report
from chatlink.commands import LINK_COMMAND, NEW_COMMAND, CommandSurface
from chatlink.core.registry import GroupRegistry
from chatlink.core.relay import RelayEngine
from chatlink.delivery.memory import InMemoryDeliveryClient
from chatlink.models.commands import CommandInvocation
from chatlink.models.messages import InboundMessage, RelayReport

console = Console()

DEMO_GUILD = "demo-guild"
DEMO_OWNER = "user1"
DEMO_CHANNELS = ("chan100", "chan200", "chan300")


async def run_demo(
    latency: float = 0.0,
    fail: bool = True,
) -> tuple[GroupRegistry, InMemoryDeliveryClient, list[RelayReport]]:
    """Build the demo wiring and relay the sample messages."""
    registry = GroupRegistry()
    client = InMemoryDeliveryClient(latency=latency)
    surface = CommandSurface(registry, client)
    engine = RelayEngine(registry, client)

    await surface.handle(
        CommandInvocation(
            name=NEW_COMMAND,
            user_id=DEMO_OWNER,
            guild_id=DEMO_GUILD,
            options={"link_id": "lounge", "title": "Lounge", "description": "chat"},
        )
    )
    for channel_id in DEMO_CHANNELS:
        await surface.handle(
            CommandInvocation(
                name=LINK_COMMAND,
                user_id=DEMO_OWNER,
                guild_id=DEMO_GUILD,
                can_manage_channels=True,
                options={"link_id": "lounge", "channel": channel_id},
            )
        )

    if fail:
        group = registry.get_group("lounge")
        if group is not None:
            client.fail_execute.add(group.members[-1].endpoint_id)

    avatar = "https://cdn.example.com/avatars/bob.png"
    messages = [
        InboundMessage(
            channel_id="chan100",
            author_display_name="bob",
            author_avatar_url=avatar,
            content="hello world",
        ),
        InboundMessage(
            channel_id="chan200",
            author_display_name="alice",
            content="hi bob",
        ),
        InboundMessage(
            channel_id="chan999",
            author_display_name="carol",
            content="nobody hears this",
        ),
        InboundMessage(
            channel_id="chan100",
            author_display_name="Chat linker",
            content="echo of a relayed message",
            is_automated=True,
        ),
    ]
    reports = await engine.relay_many(messages)
    return registry, client, reports


def demo_cmd(
    latency: float = typer.Option(
        0.05,
        "--latency",
        "-l",
        help="Simulated per-call latency of the in-memory webhooks, in seconds.",
    ),
    fail: bool = typer.Option(
        True,
        "--fail/--no-fail",
        help="Make the last linked channel's webhook reject deliveries.",
    ),
) -> None:
    """Relay sample messages through an in-memory group and show the outcome."""
    console.print()
    console.print(
        Panel(
            "[bold]chatlink demo[/bold]\n\n"
            "Group `lounge` links three channels.  Messages fan out to every\n"
            "sibling channel; a failing webhook only affects its own channel.",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    registry, client, reports = asyncio.run(run_demo(latency=latency, fail=fail))

    console.print(render_groups(registry.list_groups()))
    for report in reports:
        console.print(render_report(report))

    console.print(
        f"[bold]{len(client.deliveries)}[/bold] webhook deliveries recorded."
    )
