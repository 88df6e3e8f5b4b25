"""Cycle-scoped failure kinds raised by the PR source and notifiers.

None of these is fatal to the process: run_cycle reduces each one to a log
line and a CycleSummary. Store failures live in prnotify_store.errors.
"""

from __future__ import annotations


class FetchFailure(Exception):
    """Listing open PRs or looking up a review decision failed."""


class NotifyFailure(Exception):
    """A single notifier could not deliver. Logged, never retried."""
