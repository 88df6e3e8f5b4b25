"""Store error kinds."""

from __future__ import annotations


class StoreError(Exception):
    """The state location could not be read."""


class CorruptState(StoreError):
    """The state file exists but does not hold a valid snapshot.

    Never masked as an empty snapshot: that would re-notify every approved PR
    or silently drop history. An operator has to inspect or remove the file.
    """


class PersistFailure(StoreError):
    """An atomic save did not complete. The previous file is left intact."""
