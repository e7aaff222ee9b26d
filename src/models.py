"""Shared Pydantic data models for messenger-page-bot."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

COMMAND_KEY_PREFIX = "COMMAND_"

DEFAULT_COMMANDS: Mapping[str, str] = MappingProxyType({
    "github": "Visit: https://github.com/",
    "help": "Available commands: github, help, status",
    "status": "Server is running ✅",
})

# Commands every bot answers, even when the config file leaves them out
BUILTIN_COMMANDS = ("help", "status")


class BotConfig(BaseModel):
    """Runtime configuration, built once at start-up and never mutated."""

    model_config = ConfigDict(frozen=True)

    verify_token: str = Field(min_length=1)
    page_access_token: str | None = None
    default_reply: str
    commands: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("commands", mode="after")
    @classmethod
    def _freeze_commands(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    def command_reply(self, keyword: str) -> str | None:
        """Case-insensitive exact lookup of a command reply."""
        wanted = keyword.strip().lower()
        for name, reply in self.commands.items():
            if name.lower() == wanted:
                return reply
        return None

    def get(self, key: str) -> str | None:
        """Look up a value by its config-file key (``VERIFY_TOKEN``, ``COMMAND_HELP``...)."""
        if key.startswith(COMMAND_KEY_PREFIX):
            return self.command_reply(key[len(COMMAND_KEY_PREFIX):])
        return {
            "VERIFY_TOKEN": self.verify_token,
            "PAGE_ACCESS_TOKEN": self.page_access_token,
            "DEFAULT_REPLY": self.default_reply,
        }.get(key)
