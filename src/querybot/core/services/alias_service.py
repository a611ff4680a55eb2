"""
Alias loading and resolution.

Aliases are resolved against the command registry exactly once at startup.
Resolution is all-or-nothing: the first alias that cannot be bound aborts
startup and no partial registry is returned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path

from pydantic import ValidationError

from querybot.core.common.exceptions import AliasResolutionError, ConfigurationError
from querybot.core.config.config_loader import load_document
from querybot.core.domain.alias import AliasDefinition, ResolvedAlias
from querybot.core.services.command_service import CommandRegistry

logger = logging.getLogger(__name__)


class AliasRegistry(Mapping[str, ResolvedAlias]):
    """Read-only mapping of alias name to resolved alias."""

    def __init__(self, aliases: Mapping[str, ResolvedAlias] | None = None) -> None:
        self._aliases: dict[str, ResolvedAlias] = dict(aliases or {})

    def __getitem__(self, name: str) -> ResolvedAlias:
        return self._aliases[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)

    def names(self) -> list[str]:
        return list(self._aliases)


def load_alias_definitions(path: str | Path) -> dict[str, AliasDefinition]:
    """Load alias definitions from a JSON or YAML document.

    The document maps alias name to `{"command": ..., "format": ...}`.

    Raises:
        ConfigurationError: If the document is missing, unparsable or invalid
    """
    data = load_document(path)
    definitions: dict[str, AliasDefinition] = {}
    for name, raw in data.items():
        try:
            definitions[str(name)] = AliasDefinition.model_validate(raw)
        except ValidationError as exc:
            raise ConfigurationError(
                message=f"Invalid alias definition '{name}' in {path}",
                details={"path": str(path), "alias": name, "errors": exc.errors()},
            ) from exc
    logger.info("Loaded %d alias definitions from %s", len(definitions), path)
    return definitions


def resolve_aliases(
    definitions: Mapping[str, AliasDefinition], commands: CommandRegistry
) -> AliasRegistry:
    """Bind each alias definition to its registered command.

    Raises:
        AliasResolutionError: If an alias references an unknown command or
            shares its name with a command
    """
    resolved: dict[str, ResolvedAlias] = {}
    for name, definition in definitions.items():
        if name in commands:
            raise AliasResolutionError(
                f"Alias '{name}' conflicts with a command of the same name",
                alias_name=name,
                command_name=name,
            )
        command = commands.get(definition.command)
        if command is None:
            raise AliasResolutionError(
                f"Could not resolve alias '{name}': unknown command '{definition.command}'",
                alias_name=name,
                command_name=definition.command,
            )
        resolved[name] = ResolvedAlias(name, command, definition.format)
        logger.debug("Resolved alias %s -> %s", name, definition.command)
    return AliasRegistry(resolved)
