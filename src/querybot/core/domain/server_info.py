"""Typed results of server status queries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from querybot.core.interfaces.model_bases import InternalDTO


@dataclass(frozen=True)
class ServerInfo(InternalDTO):
    name: str = ""
    map: str = ""
    players: int = 0
    max_players: int = 0

    def summary(self) -> str:
        return f"{self.players}/{self.max_players} on {self.name} playing {self.map}"


@dataclass(frozen=True)
class Player(InternalDTO):
    name: str
    duration: timedelta = timedelta()
