"""PR source backed by the GitHub CLI.

Uses whatever session `gh auth login` stored. `reviewDecision` comes from
`gh pr view --json`.
"""

from __future__ import annotations

import json
import logging
import subprocess

from prnotify_core.errors import FetchFailure
from prnotify_core.models import PullRequest
from prnotify_core.sources.base import BasePRSource

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 60


class GhCliSource(BasePRSource):
    def __init__(self, gh_path: str = "gh", timeout: float = _DEFAULT_TIMEOUT):
        self._gh = gh_path
        self._timeout = timeout

    def list_open_prs(self) -> list[PullRequest]:
        out = self._run(
            "search", "prs",
            "--author", "@me",
            "--state", "open",
            "--json", "number,title,url,repository",
        )
        try:
            items = json.loads(out)
            return [
                PullRequest(
                    repo=item["repository"]["nameWithOwner"],
                    number=int(item["number"]),
                    title=item.get("title") or "",
                    url=item.get("url") or "",
                )
                for item in items
            ]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise FetchFailure(f"parsing PR list: {e}") from e

    def fetch_review_decision(self, repo: str, number: int) -> str:
        out = self._run("pr", "view", str(number), "--repo", repo, "--json", "reviewDecision")
        try:
            data = json.loads(out)
            # gh prints null when the repository has no review rules.
            return data.get("reviewDecision") or ""
        except (json.JSONDecodeError, AttributeError) as e:
            raise FetchFailure(f"parsing review decision for {repo}#{number}: {e}") from e

    def _run(self, *args: str) -> str:
        cmd = [self._gh, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self._timeout)
        except FileNotFoundError as e:
            raise FetchFailure(f"{self._gh} not found in PATH") from e
        except subprocess.TimeoutExpired as e:
            raise FetchFailure(f"gh {args[0]} {args[1]} timed out after {self._timeout}s") from e
        except OSError as e:
            raise FetchFailure(f"running {self._gh}: {e}") from e
        if result.returncode != 0:
            detail = (result.stderr or "").strip() or f"exit status {result.returncode}"
            raise FetchFailure(f"gh {args[0]} {args[1]}: {detail}")
        return result.stdout
