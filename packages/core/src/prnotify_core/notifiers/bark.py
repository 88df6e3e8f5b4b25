"""iOS push notifications through a Bark server (https://github.com/Finb/Bark).

Tapping the notification opens the PR URL on the device.
"""

from __future__ import annotations

import logging

import requests

from prnotify_core.errors import NotifyFailure
from prnotify_core.notifiers.base import BaseNotifier

logger = logging.getLogger(__name__)

DEFAULT_SERVER = "https://api.day.app"
GROUP = "gh-pr-notify"


class BarkNotifier(BaseNotifier):
    name = "bark"
    TIMEOUT = 10

    def __init__(
        self,
        key: str,
        server: str = DEFAULT_SERVER,
        sound: str = "",
        session: requests.Session | None = None,
    ):
        if not key:
            raise ValueError("Bark device key is required")
        self.key = key
        self.server = server.rstrip("/")
        self.sound = sound
        self._session = session or requests.Session()

    def build_payload(self, title, subtitle, body, url=None, sound=None) -> dict:
        payload = {
            "device_key": self.key,
            "title": title,
            "subtitle": subtitle,
            "body": body,
            "url": url or "",
            "group": GROUP,
        }
        sound = sound if sound is not None else self.sound
        if sound:
            payload["sound"] = sound
        return payload

    def deliver(self, title, subtitle, body, url=None, sound=None) -> None:
        payload = self.build_payload(title, subtitle, body, url, sound)
        try:
            resp = self._session.post(f"{self.server}/push", json=payload, timeout=self.TIMEOUT)
        except requests.RequestException as e:
            raise NotifyFailure(f"bark request: {e}") from e

        if resp.status_code != 200:
            raise NotifyFailure(f"bark response: {resp.status_code} {resp.reason}")

        # Bark answers {"code": 200, "message": "success"}. Any other code
        # (unknown device key, etc.) arrives with HTTP 200 too.
        try:
            result = resp.json()
        except ValueError as e:
            raise NotifyFailure(f"bark decode: {e}") from e
        if not isinstance(result, dict):
            raise NotifyFailure(f"bark decode: unexpected response {result!r}")
        if result.get("code") != 200:
            raise NotifyFailure(f"bark API error: {result.get('code')} {result.get('message', '')}")
        logger.debug("Bark push accepted for %s", subtitle)
