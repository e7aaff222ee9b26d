"""JSON config file store and the runtime config loader."""

from __future__ import annotations

import copy
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from src.models import COMMAND_KEY_PREFIX, DEFAULT_COMMANDS, BotConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/bot-config.json"

VERIFY_TOKEN_PLACEHOLDER = "replace_with_verify_token"
PAGE_TOKEN_PLACEHOLDER = "replace_with_page_access_token"

DEFAULT_CONFIG: dict[str, Any] = {
    "VERIFY_TOKEN": VERIFY_TOKEN_PLACEHOLDER,
    "PAGE_ACCESS_TOKEN": PAGE_TOKEN_PLACEHOLDER,
    "DEFAULT_REPLY": "Assalamu Alaikum 🌸 How can I help you?",
    "COMMANDS": dict(DEFAULT_COMMANDS),
}

# Environment variables that override the matching file key
_ENV_OVERRIDES = ("VERIFY_TOKEN", "PAGE_ACCESS_TOKEN", "DEFAULT_REPLY")

_PLACEHOLDERS = {VERIFY_TOKEN_PLACEHOLDER, PAGE_TOKEN_PLACEHOLDER}


class ConfigError(Exception):
    """Raised when the bot configuration cannot be read or is incomplete."""


def default_config() -> dict[str, Any]:
    return copy.deepcopy(DEFAULT_CONFIG)


def command_name(key: str) -> str | None:
    """Map ``COMMAND_<NAME>`` to the lowercase command name, else None."""
    if not key.startswith(COMMAND_KEY_PREFIX):
        return None
    name = key[len(COMMAND_KEY_PREFIX):].lower()
    return name or None


class ConfigStore:
    """Reads and writes the bot's JSON config file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> dict[str, Any]:
        """Return the file contents, or the defaults when the file is missing."""
        if not self.path.exists():
            return default_config()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Cannot read config file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self.path} must hold a JSON object")
        return data

    def load(self) -> dict[str, Any]:
        """Like read(), but writes the defaults to disk first if the file is missing."""
        if not self.path.exists():
            self.save(default_config())
        return self.read()

    def save(self, data: Mapping[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8",
            )
        except OSError as exc:
            raise ConfigError(f"Cannot write config file {self.path}: {exc}") from exc

    def get(self, key: str) -> Any:
        data = self.load()
        name = command_name(key)
        if name is not None:
            return data.get("COMMANDS", {}).get(name)
        return data.get(key)

    def set(self, key: str, value: str) -> str | None:
        """Store a value and return the command name when a command was set."""
        data = self.load()
        name = command_name(key)
        if name is not None:
            commands = data.get("COMMANDS")
            if not isinstance(commands, dict):
                commands = {}
            commands[name] = value
            data["COMMANDS"] = commands
        else:
            data[key] = value
        self.save(data)
        return name

    def reset(self) -> dict[str, Any]:
        data = default_config()
        self.save(data)
        return data


def _clean(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value in _PLACEHOLDERS:
        return None
    return value


def load_bot_config(
    path: str | Path = DEFAULT_CONFIG_PATH,
    environ: Mapping[str, str] | None = None,
) -> BotConfig:
    """Build the immutable BotConfig from the config file and the environment.

    Environment variables win over file values. Placeholder tokens left over
    from the default file are treated as unset.
    """
    env = os.environ if environ is None else environ
    data = ConfigStore(path).read()

    for key in _ENV_OVERRIDES:
        if env.get(key):
            data[key] = env[key]

    verify_token = _clean(data.get("VERIFY_TOKEN"))
    if verify_token is None:
        raise ConfigError("VERIFY_TOKEN is not configured")

    page_access_token = _clean(data.get("PAGE_ACCESS_TOKEN"))
    if page_access_token is None:
        logger.warning("PAGE_ACCESS_TOKEN is not configured; replies will only be logged")

    commands = data.get("COMMANDS")
    if commands is None:
        commands = dict(DEFAULT_COMMANDS)

    try:
        return BotConfig(
            verify_token=verify_token,
            page_access_token=page_access_token,
            default_reply=data.get("DEFAULT_REPLY") or DEFAULT_CONFIG["DEFAULT_REPLY"],
            commands=commands,
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid bot configuration: {exc}") from exc
