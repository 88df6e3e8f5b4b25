"""Build the collaborators a command needs from the merged config dict.

This lives in the CLI so neither prnotify_core nor prnotify_store know about
the config file format or about click.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from prnotify_core.notifiers.bark import BarkNotifier
from prnotify_core.notifiers.base import BaseNotifier
from prnotify_core.notifiers.macos import MacOSNotifier
from prnotify_core.sources.base import BasePRSource
from prnotify_store.json_file import JsonFileStore, default_state_path

logger = logging.getLogger(__name__)


def resolve_state_path(config: dict) -> Path:
    if config.get("state_path"):
        return Path(config["state_path"]).expanduser()
    return default_state_path()


def build_store(config: dict) -> JsonFileStore:
    """Return the file store, creating its directory. Failing here is fatal."""
    path = resolve_state_path(config)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise click.ClickException(f"Cannot create state directory {path.parent}: {e}")
    return JsonFileStore(path)


def build_notifiers(config: dict) -> list[BaseNotifier]:
    """Notifier selection:
      desktop: true  → MacOSNotifier (macOS only; skipped elsewhere)
      bark_key set   → BarkNotifier
    """
    notifiers: list[BaseNotifier] = []

    if config.get("desktop"):
        if sys.platform == "darwin":
            notifiers.append(MacOSNotifier(sound=config.get("sound") or "default"))
        else:
            logger.debug("Desktop notifications need macOS; skipping on %s.", sys.platform)

    if config.get("bark_key"):
        notifiers.append(
            BarkNotifier(
                key=config["bark_key"],
                server=config.get("bark_server") or "https://api.day.app",
                sound=config.get("bark_sound") or "",
            )
        )

    return notifiers


def build_source(config: dict) -> BasePRSource:
    """Instantiate the configured PR source after checking its preconditions.

    Raises click.UsageError when GitHub cannot be reached at all, the only
    failure that should stop the watcher before its first poll.
    """
    from prnotify_cli.auth import check_gh_cli, resolve_github_token

    if config.get("source") == "api":
        from prnotify_core.sources.github_api import GitHubApiSource

        token = config.get("github_token") or resolve_github_token()
        if not token:
            raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")
        return GitHubApiSource(token=token)

    from prnotify_core.sources.gh_cli import GhCliSource

    problem = check_gh_cli()
    if problem:
        raise click.UsageError(f"Dependency check failed: {problem}")
    return GhCliSource()
