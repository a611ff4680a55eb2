"""
Info command implementation.

Replies with a one-line summary of a game server's state.
"""

from __future__ import annotations

import logging

from querybot.core.common.exceptions import QueryError
from querybot.core.domain.commands.base_command import ChatCommand
from querybot.core.interfaces.chat_client_interface import IChatClient
from querybot.core.services.server_query_service import ServerQueryService

logger = logging.getLogger(__name__)


class InfoCommand(ChatCommand):
    """Command to show player counts, host and map of a server."""

    def __init__(self, chat: IChatClient, query_service: ServerQueryService) -> None:
        super().__init__(chat)
        self._query_service = query_service

    @property
    def name(self) -> str:
        return "info"

    @property
    def format(self) -> str:
        return "info <host:port>"

    @property
    def description(self) -> str:
        return "Show players, host and map of a game server"

    @property
    def examples(self) -> list[str]:
        return ["!info 1.2.3.4:27015"]

    async def invoke(self, sender: str, channel: str, args: str) -> None:
        address = args.strip()
        if not address:
            return
        try:
            info = await self._query_service.query_server_info(address)
        except QueryError as e:
            logger.warning("info query for %s failed: %s", address, e)
            return
        await self.reply(channel, info.summary())
