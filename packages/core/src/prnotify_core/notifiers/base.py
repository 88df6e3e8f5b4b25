"""Base notifier implementing the Template Method pattern.

Every channel shares the same message for an approval:
    notify_approval(pr) -> deliver("PR Approved", "<owner/repo#n>", <title>, <url>)
                            ^ only this differs per channel

Subclasses implement deliver() and raise NotifyFailure when the channel
rejects the message. Callers treat that as non-fatal.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prnotify_core.models import PullRequest

APPROVAL_TITLE = "PR Approved"


class BaseNotifier(ABC):
    name: str = "notifier"

    def notify_approval(self, pr: PullRequest) -> None:
        self.deliver(
            title=APPROVAL_TITLE,
            subtitle=str(pr.key),
            body=pr.title,
            url=pr.url or None,
        )

    @abstractmethod
    def deliver(
        self,
        title: str,
        subtitle: str,
        body: str,
        url: str | None = None,
        sound: str | None = None,
    ) -> None:
        """Deliver one message. `sound` overrides the channel's configured sound."""
