"""Approval transition detection.

A pure function over two snapshots: no I/O, no clock, no logging. Keys that
only appear in `previous` (PRs merged or closed since the last poll) produce
nothing and simply drop out of the next snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TypeVar

from prnotify_store.models import APPROVED

K = TypeVar("K")


def detect(
    previous: Mapping[K, str],
    current: Mapping[K, str],
    notify_first_sighting: bool = True,
) -> set[K]:
    """Return the keys that are APPROVED in `current` but were not in `previous`.

    A key missing from `previous` counts as "not previously approved", so a PR
    seen for the first time already approved is reported. The tool cannot
    tell "approved a minute ago" from "approved before the first run" and
    prefers a spurious notification over a missed one. Pass
    notify_first_sighting=False to report only keys that were already known.
    """
    transitions: set[K] = set()
    for key, status in current.items():
        if status != APPROVED:
            continue
        if key not in previous:
            if notify_first_sighting:
                transitions.add(key)
            continue
        if previous[key] != APPROVED:
            transitions.add(key)
    return transitions


def ordered(keys: Iterable[K]) -> list[K]:
    """Stable, reproducible order for logging and dispatch: by canonical key string."""
    return sorted(keys, key=str)
