from __future__ import annotations

from abc import ABC, abstractmethod

from querybot.core.domain.server_info import Player


class IStatusQueryClient(ABC):
    """Single round-trip game server status queries.

    Implementations raise QueryTransportError for any timeout, malformed
    reply or unreachable host.
    """

    @abstractmethod
    async def query_rules(self, address: str) -> list[tuple[str, str]]:
        pass

    @abstractmethod
    async def query_players(self, address: str) -> list[Player]:
        pass
