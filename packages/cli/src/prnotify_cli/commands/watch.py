"""watch command: the polling loop."""

from __future__ import annotations

import functools
import logging
import signal
import threading

import click
from rich.console import Console

from prnotify_core.config import apply_overrides, interval_seconds, validate_config
from prnotify_core.poller import CycleSummary, run_cycle
from prnotify_core.scheduler import PollScheduler

console = Console()
logger = logging.getLogger(__name__)


def _install_signal_handlers(scheduler: PollScheduler) -> None:
    """Route SIGINT/SIGTERM to scheduler.stop() so an in-flight cycle finishes.

    stop() runs on a helper thread: the handler interrupts the main thread,
    which may be holding the stop event's lock inside wait().
    """

    def _handle(signum, _frame):
        logger.info("received %s; stopping after the current cycle", signal.Signals(signum).name)
        threading.Thread(target=scheduler.stop, name="prnotify-stop", daemon=True).start()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def _print_summary(summary: CycleSummary) -> None:
    if not summary.ok:
        console.print(f"[red]Poll failed: {summary.error}[/red]")
        return
    console.print(f"[bold]{summary.total_prs}[/bold] open PR(s), [bold]{summary.new_approvals}[/bold] new approval(s)")
    for key in summary.approved:
        console.print(f"  [green]APPROVED[/green] {key}")
    if summary.failed_notifications:
        console.print(f"[yellow]{summary.failed_notifications} notification(s) failed, see log.[/yellow]")


@click.command("watch")
@click.option("--interval", default=None, help="Poll interval, e.g. 30s, 2m, 1h30m. [default: 60s]")
@click.option(
    "--source",
    type=click.Choice(["gh", "api"]),
    default=None,
    help="Where to read PRs from: the gh CLI or the GitHub API. [default: gh]",
)
@click.option("--sound", default=None, help='macOS notification sound ("none" to disable).')
@click.option("--desktop/--no-desktop", default=None, help="Enable or disable macOS notifications.")
@click.option("--bark-key", default=None, help="Bark device key for iOS push notifications.")
@click.option("--bark-server", default=None, help="Bark server URL. [default: https://api.day.app]")
@click.option("--bark-sound", default=None, help="Bark notification sound name.")
@click.option("--state-path", default=None, help="State file location. Overrides config file.")
@click.option(
    "--first-sighting/--no-first-sighting",
    "notify_first_sighting",
    default=None,
    help="Notify for PRs that are already approved the first time they are seen. [default: on]",
)
@click.option("--once", is_flag=True, help="Run a single poll cycle and exit.")
@click.pass_context
def watch_cmd(
    ctx,
    interval: str | None,
    source: str | None,
    sound: str | None,
    desktop: bool | None,
    bark_key: str | None,
    bark_server: str | None,
    bark_sound: str | None,
    state_path: str | None,
    notify_first_sighting: bool | None,
    once: bool,
):
    """Notify when one of your open pull requests becomes approved.

    Polls immediately, then every --interval until interrupted. Each PR
    triggers at most one notification per transition to APPROVED.

    \b
    Requirements:
      gh source   the GitHub CLI, installed and logged in (gh auth login)
      api source  GITHUB_TOKEN, or a gh CLI session to borrow a token from
    """
    from prnotify_cli.factory import build_notifiers, build_source, build_store

    config = apply_overrides(
        dict(ctx.obj["config"]),
        {
            "interval": interval,
            "source": source,
            "sound": sound,
            "desktop": desktop,
            "bark_key": bark_key,
            "bark_server": bark_server,
            "bark_sound": bark_sound,
            "state_path": state_path,
            "notify_first_sighting": notify_first_sighting,
        },
    )
    try:
        validate_config(config)
    except ValueError as e:
        raise click.UsageError(str(e))

    pr_source = build_source(config)
    store = build_store(config)
    notifiers = build_notifiers(config)
    if not notifiers:
        logger.warning("No notifiers configured; approvals will only be logged.")

    cycle = functools.partial(
        run_cycle,
        store,
        pr_source,
        notifiers,
        notify_first_sighting=bool(config.get("notify_first_sighting", True)),
    )

    if once:
        summary = cycle()
        _print_summary(summary)
        if not summary.ok:
            ctx.exit(1)
        return

    scheduler = PollScheduler(cycle, interval_seconds(config))
    _install_signal_handlers(scheduler)

    logger.info("gh-pr-notify: polling every %s (state: %s)", config["interval"], store.location)
    if config.get("bark_key"):
        logger.info("gh-pr-notify: bark notifications enabled (server: %s)", config.get("bark_server"))
    scheduler.run()
