"""
Alias domain model.

An alias binds a new invocation name to an existing command plus a text
template. Definitions are loaded unresolved and bound to commands once at
startup.
"""

from __future__ import annotations

import logging

from pydantic import ConfigDict, Field

from querybot.constants import ALIAS_SLOT
from querybot.core.domain.commands.base_command import BaseCommand
from querybot.core.interfaces.model_bases import DomainModel

logger = logging.getLogger(__name__)


class AliasDefinition(DomainModel):
    """An alias as stored on disk, referencing its command by name."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    command: str = Field(min_length=1, alias="Command")
    format: str = Field(default="", alias="Format")


class ResolvedAlias(BaseCommand):
    """An alias bound to the command it invokes."""

    def __init__(self, name: str, command: BaseCommand, template: str) -> None:
        self._name = name
        self._command = command
        self._template = template

    @property
    def name(self) -> str:
        return self._name

    @property
    def format(self) -> str:
        return self._template

    @property
    def description(self) -> str:
        return f"Alias for {self._command.name}"

    @property
    def command(self) -> BaseCommand:
        return self._command

    def render(self, text: str) -> str:
        """Fill the template's substitution slot with the argument text.

        Only the first slot is filled; any further '%' sequences are kept
        literally. A template without a slot is returned verbatim.
        """
        if ALIAS_SLOT in self._template:
            return self._template.replace(ALIAS_SLOT, text, 1)
        return self._template

    async def invoke(self, sender: str, channel: str, args: str) -> None:
        text = self.render(args)
        logger.debug("Alias %s expanded to %s %r", self._name, self._command.name, text)
        await self._command.invoke(sender, channel, text)
