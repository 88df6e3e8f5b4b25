"""Abstract PR source.

A source answers two questions for the poll cycle: which PRs are open for
the configured identity, and what is the review decision of one of them.
Both raise FetchFailure on any transport, auth or parse problem; run_cycle
decides whether that aborts the cycle (listing) or skips one PR (lookup).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prnotify_core.models import PullRequest


class BasePRSource(ABC):
    @abstractmethod
    def list_open_prs(self) -> list[PullRequest]:
        """Return every open PR authored by the configured identity."""

    @abstractmethod
    def fetch_review_decision(self, repo: str, number: int) -> str:
        """Return APPROVED, REVIEW_REQUIRED, CHANGES_REQUESTED or "" (no rule)."""
