"""
Message dispatcher.

Classifies each inbound chat line against the command and alias names and
invokes the matching handler with the trailing argument text.
"""

from __future__ import annotations

import asyncio

from querybot.core.common.logging_utils import get_logger
from querybot.core.domain.commands.base_command import BaseCommand
from querybot.core.services.alias_service import AliasRegistry
from querybot.core.services.command_service import (
    CommandRegistry,
    get_command_pattern,
)

logger = get_logger(__name__)


class CommandDispatcher:
    """Routes chat messages to commands and aliases."""

    def __init__(
        self,
        commands: CommandRegistry,
        aliases: AliasRegistry,
        command_prefix: str,
    ) -> None:
        self._commands = commands
        self._aliases = aliases
        self._command_prefix = command_prefix
        self._pattern = get_command_pattern(
            command_prefix, [*commands.names(), *aliases.names()]
        )
        self._tasks: set[asyncio.Task] = set()

    def match(self, text: str) -> tuple[str, str] | None:
        """Return (key, argument text) if the line invokes a command or alias."""
        m = self._pattern.match(text)
        if m is None:
            return None
        return m.group(1), m.group(2)

    async def dispatch(self, sender: str, channel: str, text: str) -> int:
        """Invoke the handlers matching a chat line.

        Returns:
            The number of handlers invoked
        """
        matched = self.match(text)
        if matched is None:
            return 0
        key, args = matched

        handlers: list[BaseCommand] = []
        command = self._commands.get(key)
        if command is not None:
            handlers.append(command)
        alias = self._aliases.get(key)
        if alias is not None:
            handlers.append(alias)

        for handler in handlers:
            logger.info(
                "executing",
                command=key,
                args=args,
                sender=sender,
                channel=channel,
                alias=handler is alias,
            )
            await handler.invoke(sender, channel, args)
        return len(handlers)

    def on_message(self, sender: str, channel: str, text: str) -> asyncio.Task | None:
        """Dispatch a chat line on its own task.

        Lines that match nothing are dropped without creating a task.
        """
        if self.match(text) is None:
            return None
        task = asyncio.get_running_loop().create_task(
            self._run(sender, channel, text)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def handle_message(self, sender: str, channel: str, text: str) -> None:
        """Chat client callback."""
        self.on_message(sender, channel, text)

    async def _run(self, sender: str, channel: str, text: str) -> None:
        try:
            await self.dispatch(sender, channel, text)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(
                "command failed", sender=sender, channel=channel, text=text
            )

    async def drain(self) -> None:
        """Wait for all in-flight dispatch tasks."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
