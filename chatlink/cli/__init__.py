"""chatlink CLI — Typer-based operator tooling.

Provides the ``chatlink`` command with subcommands for running the local
relay demo, posting through a single webhook, and managing slash-command
definitions.

All output uses Rich for formatted terminal display.
"""
