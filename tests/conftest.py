import os
from collections.abc import Callable, Iterator
from unittest.mock import patch

import pytest
from querybot.core.common.exceptions import QueryTransportError
from querybot.core.config.app_config import ENV_OVERRIDES
from querybot.core.domain.server_info import Player
from querybot.core.interfaces.chat_client_interface import IChatClient, MessageCallback
from querybot.core.interfaces.status_query_interface import IStatusQueryClient


class RecordingChatClient(IChatClient):
    """Chat client that records everything the bot sends."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.joined: list[str] = []
        self.callbacks: list[MessageCallback] = []
        self.connected = False

    def on_message(self, callback: MessageCallback) -> None:
        self.callbacks.append(callback)

    async def send(self, channel: str, text: str) -> None:
        self.sent.append((channel, text))

    async def join(self, channel: str) -> None:
        self.joined.append(channel)

    async def connect(self) -> None:
        self.connected = True

    async def deliver(self, sender: str, channel: str, text: str) -> None:
        for callback in self.callbacks:
            await callback(sender, channel, text)


class ScriptedStatusQueryClient(IStatusQueryClient):
    """Status client that replays scripted replies; exceptions are raised."""

    def __init__(
        self,
        rules: list[object] | None = None,
        players: list[object] | None = None,
    ) -> None:
        self.rules_script = list(rules or [])
        self.players_script = list(players or [])
        self.rules_calls: list[str] = []
        self.players_calls: list[str] = []

    @staticmethod
    def _next(script: list[object]) -> object:
        # The last entry repeats once the script is exhausted
        item = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(item, BaseException):
            raise item
        return item

    async def query_rules(self, address: str) -> list[tuple[str, str]]:
        self.rules_calls.append(address)
        return self._next(self.rules_script)  # type: ignore[return-value]

    async def query_players(self, address: str) -> list[Player]:
        self.players_calls.append(address)
        return self._next(self.players_script)  # type: ignore[return-value]


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def chat() -> RecordingChatClient:
    return RecordingChatClient()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def status_client_factory() -> Callable[..., ScriptedStatusQueryClient]:
    return ScriptedStatusQueryClient


@pytest.fixture
def transport_error() -> QueryTransportError:
    return QueryTransportError("timed out", address="1.2.3.4:27015")


@pytest.fixture
def clean_env() -> Iterator[None]:
    """Hide QUERYBOT_* overrides and undo anything a .env file loads."""
    with patch.dict(os.environ):
        for name in [*ENV_OVERRIDES, "QUERYBOT_LOG_LEVEL"]:
            os.environ.pop(name, None)
        yield
