"""``chatlink commands`` — show or register the slash-command definitions."""

from __future__ import annotations

import asyncio
import json

import typer
from rich.console import Console

from chatlink.commands import build_command_definitions
from chatlink.config import config
from chatlink.core.production_guard import enforce_production_constraints
from chatlink.delivery import DeliveryError
from chatlink.delivery.discord import DiscordRestClient

console = Console()


async def _register(application_id: str) -> list[dict]:
    async with DiscordRestClient.from_config(config) as client:
        return await client.register_commands(application_id, build_command_definitions())


def commands_cmd(
    register: bool = typer.Option(
        False,
        "--register",
        help="Register the definitions as global commands of the configured application.",
    ),
) -> None:
    """Print the slash-command definitions, optionally registering them."""
    definitions = build_command_definitions()
    if not register:
        console.print_json(json.dumps(definitions))
        return

    enforce_production_constraints(config)
    if not config.application_id or not config.bot_token:
        console.print(
            "[red]Registration needs CHATLINK_APPLICATION_ID and CHATLINK_BOT_TOKEN.[/red]"
        )
        raise typer.Exit(code=1)

    try:
        registered = asyncio.run(_register(config.application_id))
    except DeliveryError as exc:
        console.print(f"[red]Registration failed:[/red] {exc}")
        raise typer.Exit(code=1)

    for command in registered:
        console.print(f"[green]Registered[/green] /{command.get('name', '?')}")
