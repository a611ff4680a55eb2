from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import AliasChoices, ConfigDict, Field, field_validator

from querybot.command_prefix import validate_command_prefix
from querybot.constants import (
    DEFAULT_ALIASES_FILE,
    DEFAULT_COMMAND_CHAR,
    DEFAULT_LOG_FILE,
    DEFAULT_QUERY_ATTEMPTS,
    DEFAULT_QUERY_RETRY_DELAY,
    DEFAULT_QUERY_TIMEOUT,
    DEFAULT_RECONNECT_DELAY,
    TWITCH_IRC_HOST,
    TWITCH_IRC_PORT,
)
from querybot.core.common.logging_utils import redact_dict
from querybot.core.interfaces.model_bases import DomainModel

logger = logging.getLogger(__name__)

# Environment variables that override values from the config document.
ENV_OVERRIDES: dict[str, str] = {
    "QUERYBOT_USERNAME": "username",
    "QUERYBOT_AUTH_TOKEN": "auth_token",
    "QUERYBOT_COMMAND_CHAR": "command_char",
    "QUERYBOT_ALIASES_FILE": "aliases_file",
}


class LogLevel(str, Enum):
    """Log levels for configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class QueryConfig(DomainModel):
    """Retry discipline for server status queries."""

    attempts: int = Field(default=DEFAULT_QUERY_ATTEMPTS, ge=1)
    retry_delay: float = Field(default=DEFAULT_QUERY_RETRY_DELAY, ge=0)
    timeout: float = Field(default=DEFAULT_QUERY_TIMEOUT, gt=0)


class LoggingConfig(DomainModel):
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    log_file: str | None = DEFAULT_LOG_FILE


class IrcConfig(DomainModel):
    """Chat server endpoint."""

    host: str = TWITCH_IRC_HOST
    port: int = Field(default=TWITCH_IRC_PORT, gt=0, lt=65536)
    reconnect_delay: float = Field(default=DEFAULT_RECONNECT_DELAY, gt=0)


class AppConfig(DomainModel):
    """Top-level bot configuration."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    channels: list[str] = Field(default_factory=list)
    username: str
    auth_token: str = Field(validation_alias=AliasChoices("auth_token", "oauth", "authToken"))
    command_char: str = Field(
        default=DEFAULT_COMMAND_CHAR,
        validation_alias=AliasChoices(
            "command_char", "commandchar", "commandTriggerChar"
        ),
    )
    aliases_file: str = DEFAULT_ALIASES_FILE
    query: QueryConfig = Field(default_factory=QueryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    irc: IrcConfig = Field(default_factory=IrcConfig)

    @field_validator("command_char")
    @classmethod
    def validate_command_char(cls, v: str) -> str:
        err = validate_command_prefix(v)
        if err:
            raise ValueError(f"Invalid command prefix: {err}")
        return v

    @field_validator("channels")
    @classmethod
    def normalize_channels(cls, v: list[str]) -> list[str]:
        """Strip the IRC '#' marker and lowercase channel names."""
        return [c.strip().lstrip("#").lower() for c in v if c.strip()]

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], env: Mapping[str, str] | None = None
    ) -> AppConfig:
        """Build a config from a loaded document plus environment overrides."""
        merged: dict[str, Any] = dict(data)
        for env_name, field_name in ENV_OVERRIDES.items():
            if env and env.get(env_name):
                # Drop document aliases so the override wins
                for alias in _field_aliases(field_name):
                    merged.pop(alias, None)
                merged[field_name] = env[env_name]
                logger.debug("Config value %s overridden by %s", field_name, env_name)
        if env and env.get("QUERYBOT_LOG_LEVEL"):
            log_section = dict(merged.get("logging") or {})
            log_section["level"] = env["QUERYBOT_LOG_LEVEL"].upper()
            merged["logging"] = log_section
        return cls.model_validate(merged)

    def redacted(self) -> dict[str, Any]:
        """Return a dict of this config safe to log."""
        return redact_dict(self.model_dump(mode="json"))


def _field_aliases(field_name: str) -> list[str]:
    field = AppConfig.model_fields[field_name]
    names = [field_name]
    if isinstance(field.validation_alias, AliasChoices):
        names.extend(str(c) for c in field.validation_alias.choices)
    return names
