"""
Steam A2S status query client.

Thin adapter over python-a2s that maps its replies onto the bot's domain
types and its failures onto QueryTransportError.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

import a2s

from querybot.constants import DEFAULT_QUERY_TIMEOUT
from querybot.core.common.exceptions import InvalidAddressError, QueryTransportError
from querybot.core.domain.server_info import Player
from querybot.core.interfaces.status_query_interface import IStatusQueryClient

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    OSError,
    asyncio.TimeoutError,
    EOFError,
    a2s.BrokenMessageError,
    a2s.BufferExhaustedError,
)


def parse_address(address: str) -> tuple[str, int]:
    """Split a `host:port` string.

    Raises:
        InvalidAddressError: If the port is missing or not a valid number
    """
    host, sep, port_str = address.strip().rpartition(":")
    if not sep or not host:
        raise InvalidAddressError(f"Address must be host:port: {address!r}", address=address)
    try:
        port = int(port_str)
    except ValueError as exc:
        raise InvalidAddressError(
            f"Invalid port in address: {address!r}", address=address
        ) from exc
    if not 0 < port < 65536:
        raise InvalidAddressError(f"Port out of range: {address!r}", address=address)
    return host, port


class A2SStatusQueryClient(IStatusQueryClient):
    """Queries servers with the Steam A2S_RULES and A2S_PLAYER requests."""

    def __init__(self, timeout: float = DEFAULT_QUERY_TIMEOUT, encoding: str = "utf-8") -> None:
        self._timeout = timeout
        self._encoding = encoding

    async def query_rules(self, address: str) -> list[tuple[str, str]]:
        endpoint = parse_address(address)
        try:
            rules = await a2s.arules(endpoint, timeout=self._timeout, encoding=self._encoding)
        except _TRANSPORT_ERRORS as e:
            raise QueryTransportError(
                f"A2S_RULES request to {address} failed: {e!r}", address=address
            ) from e
        return [(str(k), str(v)) for k, v in rules.items()]

    async def query_players(self, address: str) -> list[Player]:
        endpoint = parse_address(address)
        try:
            players = await a2s.aplayers(
                endpoint, timeout=self._timeout, encoding=self._encoding
            )
        except _TRANSPORT_ERRORS as e:
            raise QueryTransportError(
                f"A2S_PLAYER request to {address} failed: {e!r}", address=address
            ) from e
        return [
            Player(name=p.name, duration=timedelta(seconds=p.duration)) for p in players
        ]
