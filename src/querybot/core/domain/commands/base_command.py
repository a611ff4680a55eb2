"""
Base command implementation.

Every invocable chat command, whether registered directly or reached through
an alias, implements this interface.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from querybot.core.interfaces.chat_client_interface import IChatClient

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """Base class for all chat commands."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Command name."""

    @property
    @abstractmethod
    def format(self) -> str:
        """Command format string."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Command description."""

    @property
    def examples(self) -> list[str]:
        """Command examples (optional)."""
        return []

    @abstractmethod
    async def invoke(self, sender: str, channel: str, args: str) -> None:
        """
        Execute the command.

        Replying to the channel is the command's own responsibility; failures
        that should stay silent in chat are logged and swallowed here.

        Args:
            sender: Name of the user who sent the message
            channel: Channel the message arrived on
            args: Argument text following the command name
        """


class ChatCommand(BaseCommand):
    """Base class for commands that reply on the chat channel."""

    def __init__(self, chat: IChatClient) -> None:
        self._chat = chat

    async def reply(self, channel: str, text: str) -> None:
        await self._chat.send(channel, text)
