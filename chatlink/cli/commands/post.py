"""``chatlink post`` — post one message through a webhook.

Useful for checking that a linked channel's webhook still resolves and
accepts posts with the configured bot token.
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from chatlink.config import config
from chatlink.core.production_guard import enforce_production_constraints
from chatlink.delivery import DeliveryError
from chatlink.delivery.discord import DiscordRestClient
from chatlink.models.messages import DeliveryPayload

console = Console()


async def _post(webhook_id: str, payload: DeliveryPayload) -> None:
    async with DiscordRestClient.from_config(config) as client:
        handle = await client.resolve(webhook_id)
        await handle.execute(payload)


def post_cmd(
    webhook_id: str = typer.Argument(..., help="Id of the webhook to post through."),
    content: str = typer.Option(..., "--content", "-c", help="Message body."),
    username: str = typer.Option(
        "chatlink", "--username", "-u", help="Display name for the post."
    ),
    avatar_url: str = typer.Option(
        None, "--avatar-url", help="Avatar image URL for the post."
    ),
) -> None:
    """Resolve a webhook and post a single message through it."""
    enforce_production_constraints(config)
    payload = DeliveryPayload(content=content, username=username, avatar_url=avatar_url)

    try:
        asyncio.run(_post(webhook_id, payload))
    except DeliveryError as exc:
        console.print(f"[red]Delivery failed:[/red] {exc}")
        raise typer.Exit(code=1)

    console.print(f"[green]Posted[/green] to webhook {webhook_id} as {username}.")
