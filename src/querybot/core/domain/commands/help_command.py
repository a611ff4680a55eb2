from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from querybot.core.domain.commands.base_command import BaseCommand, ChatCommand
from querybot.core.interfaces.chat_client_interface import IChatClient

logger = logging.getLogger(__name__)


class HelpCommand(ChatCommand):
    """Command to list the available commands or describe a single one."""

    def __init__(
        self, chat: IChatClient, handlers: Callable[[], Mapping[str, BaseCommand]]
    ) -> None:
        super().__init__(chat)
        self._handlers = handlers

    @property
    def name(self) -> str:
        return "help"

    @property
    def format(self) -> str:
        return "help [<command>]"

    @property
    def description(self) -> str:
        return "Show available commands or details for a single command"

    @property
    def examples(self) -> list[str]:
        return ["!help", "!help info"]

    async def invoke(self, sender: str, channel: str, args: str) -> None:
        handlers = self._handlers()
        cmd_name = args.strip()

        # Help for a specific command, e.g. !help info
        if cmd_name:
            handler = handlers.get(cmd_name)
            if handler is None:
                await self.reply(channel, f"Unknown command: {cmd_name}")
                return
            parts = [
                f"{handler.name} - {handler.description}",
                f"Format: {handler.format}",
            ]
            if handler.examples:
                parts.append("Examples: " + ", ".join(handler.examples))
            await self.reply(channel, " | ".join(parts))
            return

        if not handlers:
            await self.reply(channel, "No commands available.")
            return
        await self.reply(channel, "Available commands: " + ", ".join(sorted(handlers)))
