import os
from pathlib import Path
from typing import Optional

import yaml

from prnotify_core.utils.duration import parse_duration

DEFAULT_CONFIG: dict = {
    "interval": "60s",
    "source": "gh",  # "gh" (GitHub CLI) or "api" (PyGithub + token)
    "desktop": True,  # macOS banners; ignored on other platforms
    "sound": "default",  # macOS sound name, or "none"
    "bark_key": None,  # None = Bark push disabled
    "bark_server": "https://api.day.app",
    "bark_sound": "",
    "state_path": None,  # None = $XDG_STATE_HOME/gh-pr-notify/state.json
    "notify_first_sighting": True,
    "log_level": "INFO",
}

SOURCES = ("gh", "api")
BOOL_KEYS = ("desktop", "notify_first_sighting")
CONFIG_ENV = "GH_PR_NOTIFY_CONFIG"
BARK_KEY_ENV = "GH_PR_NOTIFY_BARK_KEY"


def default_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "gh-pr-notify" / "config.yml"


def load_config(config_path: Optional[str] = None, cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. config.yml (--config, $GH_PR_NOTIFY_CONFIG, or the XDG default)
      3. Environment variables (credentials only)
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path) if config_path else default_config_path()
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"{path}: expected a mapping at the top level")
        config.update(file_config)

    bark_key = os.environ.get(BARK_KEY_ENV)
    if bark_key:
        config["bark_key"] = bark_key
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    apply_overrides(config, cli_overrides)
    return config


def apply_overrides(config: dict, overrides: Optional[dict]) -> dict:
    """Merge CLI flags into config in place. Flags left unset (None) are ignored."""
    for key, value in (overrides or {}).items():
        if value is not None:
            config[key] = value
    return config


def interval_seconds(config: dict) -> float:
    return parse_duration(config["interval"])


def validate_config(config: dict) -> None:
    """Raise ValueError for settings that would only fail later, mid-loop."""
    interval_seconds(config)
    if config.get("source") not in SOURCES:
        raise ValueError(f"Unknown source: {config.get('source')!r}. Choose 'gh' or 'api'.")
    for key in BOOL_KEYS:
        if key in config and not isinstance(config[key], bool):
            raise ValueError(f"{key} must be true or false, got {config[key]!r}")
