"""status command: display the persisted snapshot."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from prnotify_store.errors import StoreError
from prnotify_store.json_file import JsonFileStore
from prnotify_store.models import APPROVED, CHANGES_REQUESTED, REVIEW_REQUIRED

console = Console()

_STATUS_STYLE = {
    APPROVED: "green",
    CHANGES_REQUESTED: "red",
    REVIEW_REQUIRED: "yellow",
}


@click.command("status")
@click.option("--state-path", default=None, help="State file location. Overrides config file.")
@click.pass_context
def status_cmd(ctx, state_path: str | None):
    """Show the last known review decision of every tracked PR.

    Reads the state file written by `watch`; no GitHub calls are made.
    """
    from prnotify_cli.factory import resolve_state_path
    from prnotify_core.config import apply_overrides

    config = apply_overrides(dict(ctx.obj["config"]), {"state_path": state_path})
    store = JsonFileStore(resolve_state_path(config))

    try:
        snapshot = store.load()
    except StoreError as e:
        raise click.ClickException(f"{e}\nInspect or delete {store.location} to start fresh.")

    if not snapshot:
        console.print(f"[yellow]No pull requests tracked yet ({store.location}).[/yellow]")
        return

    table = Table(title=f"Tracked PRs ({store.location})", show_header=True, header_style="bold cyan")
    table.add_column("PR", style="bold")
    table.add_column("Review decision")

    for key in sorted(snapshot):
        status = snapshot[key]
        if not status:
            table.add_row(str(key), "[dim]no review rule[/dim]")
            continue
        style = _STATUS_STYLE.get(status, "white")
        table.add_row(str(key), f"[{style}]{status}[/{style}]")

    console.print(table)
