"""
Server status queries with bounded retries.

Transport failures are retried per the configured policy. A reply holding a
non-numeric value where a number is expected fails immediately without
another attempt.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Iterable, Sequence

from querybot.constants import (
    RULE_MAP,
    RULE_MAX_CONNECTIONS,
    RULE_OPEN_CONNECTIONS,
    RULE_OWNER_NAME,
)
from querybot.core.common.exceptions import QueryParseError, QueryTransportError
from querybot.core.domain.server_info import Player, ServerInfo
from querybot.core.interfaces.status_query_interface import IStatusQueryClient
from querybot.core.services.retry import RetryPolicy, SleepFunc, retry_async

logger = logging.getLogger(__name__)

# Optional sign and ASCII digits only; no padding or digit separators.
INTEGER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)


def _parse_int(name: str, value: str, address: str | None = None) -> int:
    if not isinstance(value, str) or INTEGER_PATTERN.fullmatch(value) is None:
        raise QueryParseError(
            f"Rule {name} is not a number: {value!r}",
            address=address,
            details={"rule": name, "value": value},
        )
    return int(value)


def parse_server_info(
    rules: Iterable[tuple[str, str]], address: str | None = None
) -> ServerInfo:
    """Extract a ServerInfo from an unordered list of (name, value) rules.

    Unrecognized rules are ignored.

    Raises:
        QueryParseError: If a numeric rule holds a non-numeric value
    """
    name = ""
    map_name = ""
    max_players = 0
    open_connections = 0
    for rule_name, value in rules:
        if rule_name == RULE_OWNER_NAME:
            name = value
        elif rule_name == RULE_OPEN_CONNECTIONS:
            open_connections = _parse_int(rule_name, value, address)
        elif rule_name == RULE_MAX_CONNECTIONS:
            max_players = _parse_int(rule_name, value, address)
        elif rule_name == RULE_MAP:
            map_name = value
    return ServerInfo(
        name=name,
        map=map_name,
        players=max_players - open_connections,
        max_players=max_players,
    )


def filter_players(players: Iterable[Player], filters: Sequence[str]) -> list[Player]:
    """Keep players whose name contains any of the filter substrings.

    Matching is case-sensitive and keeps the input order. An empty filter
    list keeps every player.
    """
    if not filters:
        return list(players)
    return [p for p in players if any(f in p.name for f in filters)]


class ServerQueryService:
    """Queries game servers through a status query client."""

    def __init__(
        self,
        client: IStatusQueryClient,
        policy: RetryPolicy | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._client = client
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    async def query_server_info(self, address: str) -> ServerInfo:
        """Fetch the server's rules and summarize them.

        Raises:
            QueryTransportError: If every attempt failed
            QueryParseError: If the rules hold malformed numbers
        """
        rules = await retry_async(
            lambda: self._client.query_rules(address),
            self._policy,
            (QueryTransportError,),
            sleep=self._sleep,
            description=f"rules query for {address}",
        )
        info = parse_server_info(rules, address)
        logger.debug("Server info for %s: %s", address, info)
        return info

    async def query_players(self, address: str, filters: Sequence[str]) -> list[Player]:
        """Fetch the server's players and keep those matching `filters`.

        Raises:
            QueryTransportError: If every attempt failed
        """
        players = await retry_async(
            lambda: self._client.query_players(address),
            self._policy,
            (QueryTransportError,),
            sleep=self._sleep,
            description=f"players query for {address}",
        )
        return filter_players(players, filters)
