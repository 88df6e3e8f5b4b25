"""macOS Notification Center banners via osascript.

Sound can be "default", "none" (silent), or any system sound name (Basso,
Blow, Bottle, Frog, Funk, Glass, Hero, Morse, Ping, Pop, Purr, Sosumi,
Submarine, Tink).

osascript cannot open a URL on click (that opens Script Editor), so the URL
is dropped; the subtitle carries the PR key, which is enough to find it.
"""

from __future__ import annotations

import subprocess

from prnotify_core.errors import NotifyFailure
from prnotify_core.notifiers.base import BaseNotifier

SILENT = "none"


def escape_applescript(text: str) -> str:
    # Backslashes first, or the escaped quotes get doubled.
    return text.replace("\\", "\\\\").replace('"', '\\"')


def build_script(title: str, subtitle: str, body: str, sound: str) -> str:
    script = 'display notification "{}" with title "{}" subtitle "{}"'.format(
        escape_applescript(body),
        escape_applescript(title),
        escape_applescript(subtitle),
    )
    if sound and sound != SILENT:
        script += f' sound name "{escape_applescript(sound)}"'
    return script


class MacOSNotifier(BaseNotifier):
    name = "macos"
    TIMEOUT = 10

    def __init__(self, sound: str = "default"):
        self.sound = sound

    def deliver(self, title, subtitle, body, url=None, sound=None) -> None:
        script = build_script(title, subtitle, body, sound if sound is not None else self.sound)
        try:
            result = subprocess.run(
                ["osascript", "-e", script],
                capture_output=True,
                text=True,
                timeout=self.TIMEOUT,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise NotifyFailure(f"osascript notification: {e}") from e
        if result.returncode != 0:
            raise NotifyFailure(f"osascript notification: {(result.stderr or '').strip() or result.returncode}")
