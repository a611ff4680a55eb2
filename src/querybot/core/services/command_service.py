"""Command registry and the matcher built over its keys."""

import logging
import re
from collections.abc import Iterable

from querybot.core.common.exceptions import ConfigurationError
from querybot.core.domain.commands.base_command import BaseCommand

logger = logging.getLogger(__name__)


def get_command_pattern(command_prefix: str, keys: Iterable[str]) -> re.Pattern:
    """Get regex pattern for detecting commands and aliases.

    The pattern captures the key and the text following it. A key must be
    followed by whitespace or the end of the line, so `!info` never matches
    `!infox`.

    Args:
        command_prefix: The trigger prefix
        keys: Command and alias names

    Returns:
        A compiled regex pattern

    Raises:
        ConfigurationError: If the prefix or the key set is empty, or the
            pattern cannot be compiled
    """
    if not command_prefix:
        raise ConfigurationError("Command prefix must not be empty")
    names = sorted({k for k in keys if k}, key=lambda k: (-len(k), k))
    if not names:
        raise ConfigurationError("No commands or aliases to match")

    escaped_prefix = re.escape(command_prefix)
    alternatives = "|".join(re.escape(name) for name in names)
    try:
        return re.compile(rf"^{escaped_prefix}({alternatives})(?:\s|$)(.*?)$")
    except re.error as exc:
        raise ConfigurationError(
            f"Could not build command pattern: {exc}", details={"keys": names}
        ) from exc


class CommandRegistry:
    """Registry for command handlers."""

    def __init__(self) -> None:
        self._commands: dict[str, BaseCommand] = {}
        self._frozen = False

    def register(self, command: BaseCommand) -> None:
        """Register a command handler. A second command with the same name replaces the first.

        Raises:
            ConfigurationError: If the registry has been frozen
        """
        if self._frozen:
            raise ConfigurationError(
                f"Cannot register '{command.name}': command registry is frozen"
            )
        if command.name in self._commands:
            logger.warning(f"Replacing registered command: {command.name}")
        self._commands[command.name] = command
        logger.info(f"Registered command: {command.name}")

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> BaseCommand | None:
        return self._commands.get(name)

    def get_all(self) -> dict[str, BaseCommand]:
        """Get a copy of all registered commands."""
        return self._commands.copy()

    def names(self) -> list[str]:
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)
