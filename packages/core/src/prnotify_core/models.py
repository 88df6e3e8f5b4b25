"""Pull request data handed from a PR source to the poll cycle."""

from __future__ import annotations

from dataclasses import dataclass

from prnotify_store.models import PullRequestKey


@dataclass(frozen=True)
class PullRequest:
    """An open pull request authored by the configured identity."""

    repo: str  # full name, "owner/repo"
    number: int
    title: str
    url: str

    @property
    def key(self) -> PullRequestKey:
        return PullRequestKey(repo=self.repo, number=self.number)
