"""CLI entry point for gh-pr-notify.

Commands:
  watch: poll GitHub and notify when one of your PRs becomes approved
  status: show the last known review decision of every tracked PR
  ping: send a test notification through every configured channel
"""

from __future__ import annotations

import click
import yaml

from prnotify_cli.commands.ping import ping_cmd
from prnotify_cli.commands.status import status_cmd
from prnotify_cli.commands.watch import watch_cmd
from prnotify_cli.log_setup import LEVELS, configure_logging


@click.group()
@click.version_option(package_name="gh-pr-notify", prog_name="gh-pr-notify")
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Path to the configuration file. [default: ~/.config/gh-pr-notify/config.yml]",
    envvar="GH_PR_NOTIFY_CONFIG",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(list(LEVELS), case_sensitive=False),
    default=None,
    help="Logging verbosity. Overrides config file.",
)
@click.pass_context
def main(ctx: click.Context, config_path: str | None, log_level: str | None):
    """Desktop and push notifications when your GitHub pull requests get approved."""
    from prnotify_core.config import load_config

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except (OSError, yaml.YAMLError, ValueError) as e:
        raise click.UsageError(f"Could not load configuration: {e}")

    configure_logging(log_level or config.get("log_level"))
    ctx.obj["config"] = config


main.add_command(watch_cmd)
main.add_command(status_cmd)
main.add_command(ping_cmd)
