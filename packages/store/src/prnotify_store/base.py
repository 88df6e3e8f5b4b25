"""Abstract state store interface.

The poll cycle depends on BaseStateStore, not on a concrete backend, so a
test can hand it any location without touching global state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prnotify_store.models import StateSnapshot


class BaseStateStore(ABC):
    """Durable key -> review decision mapping with atomic replace semantics.

    A store is exclusively owned by one running instance. There is no
    cross-process locking; two watchers on the same location is unsupported.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable description of where the snapshot lives."""

    @abstractmethod
    def load(self) -> StateSnapshot:
        """Return the last saved snapshot, or an empty one on first run.

        Raises CorruptState if stored data exists but cannot be parsed.
        """

    @abstractmethod
    def save(self, snapshot: StateSnapshot) -> None:
        """Replace the stored snapshot atomically.

        Raises PersistFailure; on failure the previous snapshot must survive.
        """
