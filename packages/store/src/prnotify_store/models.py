"""Persisted state models.

Decoupled from prnotify_core so the store layer can be used and tested on
its own. The core package builds on these types; the reverse is never true.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Review decisions as reported by GitHub's `reviewDecision` field.
# Anything other than APPROVED counts as "not approved".
APPROVED = "APPROVED"
REVIEW_REQUIRED = "REVIEW_REQUIRED"
CHANGES_REQUESTED = "CHANGES_REQUESTED"
NO_REVIEW_RULE = ""  # no branch protection rule configured

_KEY_RE = re.compile(r"^(?P<repo>[^/\s#]+/[^/\s#]+)#(?P<number>[1-9][0-9]*)$")


@dataclass(frozen=True)
class PullRequestKey:
    """Stable identifier for a pull request, rendered as ``owner/repo#123``."""

    repo: str  # full name, "owner/repo"
    number: int

    def __str__(self) -> str:
        return f"{self.repo}#{self.number}"

    def __lt__(self, other: PullRequestKey) -> bool:
        if not isinstance(other, PullRequestKey):
            return NotImplemented
        return str(self) < str(other)

    @classmethod
    def parse(cls, text: str) -> PullRequestKey:
        match = _KEY_RE.match(text)
        if match is None:
            raise ValueError(f"Not a pull request key: {text!r}")
        return cls(repo=match.group("repo"), number=int(match.group("number")))


# Last known review decision of every open PR as of the previous successful poll.
StateSnapshot = dict[PullRequestKey, str]
