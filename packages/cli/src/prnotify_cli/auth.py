"""GitHub access preconditions.

Resolution order for the API source token (stops at first success):
  1. GITHUB_TOKEN environment variable (explicit override)
  2. `gh auth token` (GitHub CLI session after `gh auth login`)

The gh source needs no token of its own, only an installed and
authenticated gh binary; check_gh_cli() verifies that before the first poll.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess

logger = logging.getLogger(__name__)


def resolve_github_token() -> str | None:
    """Return a GitHub token or None if no valid source is available.

    Never raises; callers should check for None and emit a UsageError.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            gh_token = result.stdout.strip()
            if gh_token:
                logger.debug("Resolved GitHub token via gh CLI session.")
                return gh_token
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass

    return None


def check_gh_cli(gh_path: str = "gh") -> str | None:
    """Return an error message if gh is missing or not logged in, else None."""
    if shutil.which(gh_path) is None:
        return "gh CLI not found in PATH - install with: brew install gh"

    try:
        result = subprocess.run(
            [gh_path, "auth", "status"],
            capture_output=True,
            text=True,
            timeout=15,
        )
    except subprocess.TimeoutExpired:
        return "gh auth status timed out"
    if result.returncode != 0:
        return "gh not authenticated - run: gh auth login"
    return None
