"""One fetch -> diff -> notify -> persist pass."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from prnotify_core.detector import detect, ordered
from prnotify_core.errors import FetchFailure, NotifyFailure
from prnotify_store.errors import PersistFailure, StoreError

if TYPE_CHECKING:
    from prnotify_core.models import PullRequest
    from prnotify_core.notifiers.base import BaseNotifier
    from prnotify_core.sources.base import BasePRSource
    from prnotify_store.base import BaseStateStore
    from prnotify_store.models import PullRequestKey, StateSnapshot

logger = logging.getLogger(__name__)


@dataclass
class CycleSummary:
    """Outcome of run_cycle, reduced to what the CLI and logs need."""

    total_prs: int = 0
    new_approvals: int = 0
    approved: list[str] = field(default_factory=list)  # canonical keys, dispatch order
    failed_notifications: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_cycle(
    store: BaseStateStore,
    source: BasePRSource,
    notifiers: Sequence[BaseNotifier],
    notify_first_sighting: bool = True,
) -> CycleSummary:
    """Run one poll cycle against `store` and return its summary.

    Nothing is written unless the cycle gets all the way to save(). A failed
    listing or an unreadable store aborts before any notification goes out.

    Delivery is at-most-once per transition: a key whose notification failed
    is still saved as APPROVED and will not fire again. If save() fails after
    notifications went out they cannot be taken back; the next cycle may
    notify the same keys again.
    """
    try:
        prs = source.list_open_prs()
    except FetchFailure as e:
        logger.error("error fetching PRs: %s", e)
        return CycleSummary(error=f"fetch: {e}")

    try:
        previous = store.load()
    except StoreError as e:
        logger.error("error loading state from %s: %s", store.location, e)
        return CycleSummary(total_prs=len(prs), error=f"load: {e}")

    current: StateSnapshot = {}
    by_key: dict[PullRequestKey, PullRequest] = {}
    for pr in prs:
        try:
            decision = source.fetch_review_decision(pr.repo, pr.number)
        except FetchFailure as e:
            # Left out of the new snapshot: a lookup that keeps failing is
            # never mistaken for a transition.
            logger.warning("error fetching review for %s: %s", pr.key, e)
            continue
        current[pr.key] = decision
        by_key[pr.key] = pr

    transitions = ordered(detect(previous, current, notify_first_sighting=notify_first_sighting))
    summary = CycleSummary(
        total_prs=len(prs),
        new_approvals=len(transitions),
        approved=[str(key) for key in transitions],
    )

    for key in transitions:
        pr = by_key[key]
        logger.info("APPROVED: %s - %s", key, pr.title)
        summary.failed_notifications += _dispatch(pr, notifiers)

    try:
        store.save(current)
    except PersistFailure as e:
        logger.error("error saving state to %s: %s", store.location, e)
        summary.error = f"save: {e}"
        return summary

    logger.info("poll complete: %d PRs, %d new approvals", summary.total_prs, summary.new_approvals)
    return summary


def _dispatch(pr: PullRequest, notifiers: Sequence[BaseNotifier]) -> int:
    """Send one approval through every notifier; return how many failed."""
    failures = 0
    for notifier in notifiers:
        try:
            notifier.notify_approval(pr)
        except NotifyFailure as e:
            failures += 1
            logger.warning("%s notification error for %s: %s", notifier.name, pr.key, e)
        except Exception:
            # Any notifier error is a failed delivery; the cycle still reaches save().
            failures += 1
            logger.exception("%s notifier crashed for %s", notifier.name, pr.key)
    return failures
