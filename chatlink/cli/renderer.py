"""Rich terminal rendering for groups and relay reports.

Color scheme
------------
- green     : delivered
- yellow    : resolve_failed
- red       : delivery_failed
- dim       : skipped relays
"""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table

from chatlink.models.groups import GroupSnapshot
from chatlink.models.messages import DeliveryStatus, RelayReport

_STATUS_LABELS: dict[DeliveryStatus, str] = {
    DeliveryStatus.DELIVERED: "[green]DELIVERED[/green]",
    DeliveryStatus.RESOLVE_FAILED: "[yellow]RESOLVE FAILED[/yellow]",
    DeliveryStatus.DELIVERY_FAILED: "[bold red]DELIVERY FAILED[/bold red]",
}


def render_groups(groups: list[GroupSnapshot]) -> Table:
    """Build a table with one row per group."""
    table = Table(title="Public links", header_style="bold cyan")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Description", style="dim")
    table.add_column("Channels", justify="right")
    table.add_column("Owner")

    for group in groups:
        table.add_row(
            group.group_id,
            group.title,
            group.description,
            str(group.member_count),
            group.owner_id,
        )
    return table


def render_report(report: RelayReport) -> Panel:
    """Render the outcome of one relay call."""
    title = f"[bold]Message {report.message_id}[/bold] from channel {report.source_channel_id}"

    if report.skipped_reason:
        return Panel(
            f"[dim]Not relayed: {report.skipped_reason}[/dim]",
            title=title,
            border_style="dim",
        )

    table = Table(show_header=True, header_style="bold cyan", expand=True)
    table.add_column("Channel")
    table.add_column("Endpoint", style="dim")
    table.add_column("Status", justify="center")
    table.add_column("Error")

    for outcome in report.outcomes:
        table.add_row(
            outcome.channel_id,
            outcome.endpoint_id,
            _STATUS_LABELS[outcome.status],
            outcome.error,
        )

    border = "red" if report.failed else "green"
    return Panel(
        table,
        title=title,
        subtitle=f"{len(report.delivered)}/{report.attempted} delivered",
        border_style=border,
    )
