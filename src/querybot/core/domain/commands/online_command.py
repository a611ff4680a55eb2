"""
Online command implementation.

Lists the players on a game server whose names contain any of the given
filter terms.
"""

from __future__ import annotations

import logging
import re

from querybot.core.common.exceptions import QueryError
from querybot.core.domain.commands.base_command import ChatCommand
from querybot.core.interfaces.chat_client_interface import IChatClient
from querybot.core.services.server_query_service import ServerQueryService

logger = logging.getLogger(__name__)

# online <address> <filter1;filter2;...>
ARGS_PATTERN = re.compile(r"^(\S+) (.+)$")
FILTER_SEPARATOR = ";"


def parse_online_args(args: str) -> tuple[str, list[str]] | None:
    """Split `online` arguments into the address and its filter terms."""
    m = ARGS_PATTERN.match(args.strip())
    if m is None:
        return None
    return m.group(1), m.group(2).split(FILTER_SEPARATOR)


class OnlineCommand(ChatCommand):
    """Command to list matching players on a server."""

    def __init__(self, chat: IChatClient, query_service: ServerQueryService) -> None:
        super().__init__(chat)
        self._query_service = query_service

    @property
    def name(self) -> str:
        return "online"

    @property
    def format(self) -> str:
        return "online <host:port> <filter1;filter2;...>"

    @property
    def description(self) -> str:
        return "List players whose names contain any of the filters"

    @property
    def examples(self) -> list[str]:
        return ["!online 1.2.3.4:27015 Bob;Carl"]

    async def invoke(self, sender: str, channel: str, args: str) -> None:
        parsed = parse_online_args(args)
        if parsed is None:
            logger.debug("Ignoring malformed online arguments: %r", args)
            return
        address, filters = parsed
        try:
            players = await self._query_service.query_players(address, filters)
        except QueryError as e:
            logger.warning("online query for %s failed: %s", address, e)
            return
        if not players:
            return
        await self.reply(channel, "\t".join(f"'{p.name}'" for p in players))
