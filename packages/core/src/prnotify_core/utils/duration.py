"""Human-friendly durations: "30s", "2m", "1h30m", "1.5m", "500ms" or bare seconds."""

from __future__ import annotations

import re

_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}
_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_FULL_RE = re.compile(r"^(?:\d+(?:\.\d+)?(?:ms|s|m|h))+$")


def parse_duration(value: str | int | float) -> float:
    """Return the duration in seconds. Raises ValueError unless it is positive."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = value.strip().replace(" ", "")
        if re.fullmatch(r"\d+(?:\.\d+)?", text):
            seconds = float(text)
        elif _FULL_RE.match(text):
            seconds = sum(float(n) * _UNITS[unit] for n, unit in _PART_RE.findall(text))
        else:
            raise ValueError(f"Invalid duration: {value!r} (use e.g. 30s, 2m, 1h30m)")
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return seconds
