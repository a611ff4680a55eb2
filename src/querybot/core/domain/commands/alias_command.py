from __future__ import annotations

import logging

from querybot.core.domain.commands.base_command import ChatCommand

logger = logging.getLogger(__name__)


class AliasCommand(ChatCommand):
    """Placeholder for managing aliases from chat.

    Aliases are resolved once at startup; changing them at runtime would
    require rebuilding the command pattern, which is not supported yet.
    """

    @property
    def name(self) -> str:
        return "alias"

    @property
    def format(self) -> str:
        return "alias set <name> <command> <text %s> | alias rm <name>"

    @property
    def description(self) -> str:
        return "Manage aliases (not implemented)"

    async def invoke(self, sender: str, channel: str, args: str) -> None:
        logger.info("alias command requested by %s: %r", sender, args)
        await self.reply(channel, "NOT IMPLEMENTED")
