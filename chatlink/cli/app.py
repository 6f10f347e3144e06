"""Main Typer application — imports and registers all CLI commands.

Entry point: ``chatlink`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer

from chatlink.cli.commands.demo import demo_cmd
from chatlink.cli.commands.post import post_cmd
from chatlink.cli.commands.slash import commands_cmd
from chatlink.config import config

app = typer.Typer(
    name="chatlink",
    help="chatlink: relay messages across channels linked into named groups.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="demo", help="Relay sample messages through in-memory webhooks.")(demo_cmd)
app.command(name="post", help="Post one message through a webhook.")(post_cmd)
app.command(name="commands", help="Show or register slash-command definitions.")(commands_cmd)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        config.log_level, "--log-level", help="Logging level for the run."
    ),
) -> None:
    """Configure logging before any subcommand runs."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
