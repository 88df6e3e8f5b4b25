"""ping command: send a test notification."""

from __future__ import annotations

import click
from rich.console import Console

from prnotify_core.errors import NotifyFailure

console = Console()


@click.command("ping")
@click.option("--sound", default=None, help='macOS notification sound ("none" to disable).')
@click.option("--bark-key", default=None, help="Bark device key for iOS push notifications.")
@click.option("--bark-server", default=None, help="Bark server URL.")
@click.pass_context
def ping_cmd(ctx, sound: str | None, bark_key: str | None, bark_server: str | None):
    """Send a test notification through every configured channel."""
    from prnotify_cli.factory import build_notifiers
    from prnotify_core.config import apply_overrides

    config = apply_overrides(
        dict(ctx.obj["config"]),
        {"sound": sound, "bark_key": bark_key, "bark_server": bark_server},
    )
    notifiers = build_notifiers(config)
    if not notifiers:
        raise click.UsageError("No notifiers configured. Desktop notifications need macOS; or set --bark-key.")

    failed = 0
    for notifier in notifiers:
        try:
            notifier.deliver(
                title="gh-pr-notify",
                subtitle="Test notification",
                body="Notifications are working.",
                url="https://github.com/pulls",
            )
        except NotifyFailure as e:
            failed += 1
            console.print(f"[red]✗ {notifier.name}: {e}[/red]")
        else:
            console.print(f"[green]✓ {notifier.name}[/green]")

    if failed:
        ctx.exit(1)
