"""JsonFileStore: one JSON object per installation, keyed by "owner/repo#N".

Keys are written sorted with a fixed indent, so saving the same snapshot
twice yields identical bytes.

Writes go through a temp file in the target directory followed by
os.replace(); a reader sees either the old snapshot or the new one.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from prnotify_store.base import BaseStateStore
from prnotify_store.errors import CorruptState, PersistFailure, StoreError
from prnotify_store.models import PullRequestKey, StateSnapshot

logger = logging.getLogger(__name__)

APP_NAME = "gh-pr-notify"
STATE_FILENAME = "state.json"
_TEMP_PREFIX = "state-"
_TEMP_SUFFIX = ".json"


def default_state_path() -> Path:
    """Return $XDG_STATE_HOME/gh-pr-notify/state.json (~/.local/state by default)."""
    base = os.environ.get("XDG_STATE_HOME") or str(Path.home() / ".local" / "state")
    return Path(base) / APP_NAME / STATE_FILENAME


def encode_snapshot(snapshot: StateSnapshot) -> str:
    ordered = {str(key): snapshot[key] for key in sorted(snapshot)}
    return json.dumps(ordered, indent=2, ensure_ascii=False) + "\n"


def decode_snapshot(text: str) -> StateSnapshot:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptState(f"state file is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise CorruptState(f"state file must hold a JSON object, got {type(raw).__name__}")

    snapshot: StateSnapshot = {}
    for key_text, status in raw.items():
        if not isinstance(status, str):
            raise CorruptState(f"status for {key_text!r} must be a string, got {status!r}")
        try:
            key = PullRequestKey.parse(key_text)
        except ValueError as e:
            raise CorruptState(str(e)) from e
        snapshot[key] = status
    return snapshot


def load_snapshot(path: str | os.PathLike) -> StateSnapshot:
    """Read the snapshot at path. A missing file is a first run, not an error."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.debug("No state at %s yet; starting empty.", path)
        return {}
    except OSError as e:
        raise StoreError(f"reading state file {path}: {e}") from e
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CorruptState(f"state file is not valid UTF-8: {e}") from e
    return decode_snapshot(text)


def save_snapshot(path: str | os.PathLike, snapshot: StateSnapshot) -> None:
    """Atomically replace the snapshot at path.

    The temp file lives in the same directory as the target so the final
    rename never crosses a filesystem boundary.
    """
    path = Path(path)
    data = encode_snapshot(snapshot).encode("utf-8")
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=_TEMP_PREFIX, suffix=_TEMP_SUFFIX, dir=path.parent)
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            _remove_quietly(tmp_name)
        raise PersistFailure(f"saving state to {path}: {e}") from e
    logger.debug("Saved %d entries to %s", len(snapshot), path)


def _remove_quietly(name: str) -> None:
    try:
        os.unlink(name)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove temp file %s: %s", name, e)


class JsonFileStore(BaseStateStore):
    """Stores the snapshot as a canonical JSON object in a local file.

    The path defaults to default_state_path(). Configure with
    `state_path: /path/to/state.json` in config.yml or --state-path.
    """

    def __init__(self, path: str | os.PathLike | None = None):
        self._path = Path(path) if path is not None else default_state_path()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def load(self) -> StateSnapshot:
        return load_snapshot(self._path)

    def save(self, snapshot: StateSnapshot) -> None:
        save_snapshot(self._path, snapshot)
