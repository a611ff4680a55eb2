from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

# (sender, channel, text)
MessageCallback = Callable[[str, str, str], Awaitable[None]]


class IChatClient(ABC):
    """Chat transport the bot reads messages from and replies to."""

    @abstractmethod
    def on_message(self, callback: MessageCallback) -> None:
        """Register the callback invoked for every inbound channel message."""

    @abstractmethod
    async def send(self, channel: str, text: str) -> None:
        pass

    @abstractmethod
    async def join(self, channel: str) -> None:
        pass

    @abstractmethod
    async def connect(self) -> None:
        """Connect and process inbound traffic until the connection closes."""
