"""
Bot assembly.

Builds the command registry, resolves aliases against it, and connects the
resulting dispatcher to the chat client. Any resolution failure raises
before the bot connects.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from querybot.connectors.a2s_client import A2SStatusQueryClient
from querybot.connectors.twitch_irc import TwitchIrcClient
from querybot.core.config.app_config import AppConfig
from querybot.core.domain.alias import AliasDefinition
from querybot.core.domain.commands.alias_command import AliasCommand
from querybot.core.domain.commands.base_command import BaseCommand
from querybot.core.domain.commands.help_command import HelpCommand
from querybot.core.domain.commands.info_command import InfoCommand
from querybot.core.domain.commands.online_command import OnlineCommand
from querybot.core.interfaces.chat_client_interface import IChatClient
from querybot.core.interfaces.status_query_interface import IStatusQueryClient
from querybot.core.services.alias_service import AliasRegistry, resolve_aliases
from querybot.core.services.command_service import CommandRegistry
from querybot.core.services.dispatcher import CommandDispatcher
from querybot.core.services.retry import RetryPolicy
from querybot.core.services.server_query_service import ServerQueryService

logger = logging.getLogger(__name__)


def build_command_registry(
    chat: IChatClient,
    query_service: ServerQueryService,
    handlers: Callable[[], Mapping[str, BaseCommand]],
) -> CommandRegistry:
    """Register the built-in commands and freeze the registry."""
    registry = CommandRegistry()
    registry.register(HelpCommand(chat, handlers))
    registry.register(AliasCommand(chat))
    registry.register(OnlineCommand(chat, query_service))
    registry.register(InfoCommand(chat, query_service))
    registry.freeze()
    return registry


class QueryBot:
    """A fully wired bot: registries, dispatcher and chat connection."""

    def __init__(
        self,
        config: AppConfig,
        chat: IChatClient,
        query_service: ServerQueryService,
        alias_definitions: Mapping[str, AliasDefinition],
    ) -> None:
        self.config = config
        self.chat = chat
        self.commands = build_command_registry(chat, query_service, self.handlers)
        self.aliases: AliasRegistry = resolve_aliases(alias_definitions, self.commands)
        self.dispatcher = CommandDispatcher(
            self.commands, self.aliases, config.command_char
        )
        chat.on_message(self.dispatcher.handle_message)
        logger.info(
            "Bot ready with %d commands and %d aliases",
            len(self.commands),
            len(self.aliases),
        )

    def handlers(self) -> dict[str, BaseCommand]:
        """Every invocable name, commands and aliases alike."""
        return {**self.commands.get_all(), **self.aliases}

    async def run(self) -> None:
        """Join the configured channels and process chat until disconnected."""
        for channel in self.config.channels:
            logger.info("joining channel %s", channel)
            await self.chat.join(channel)
        logger.info("connecting")
        try:
            await self.chat.connect()
        finally:
            await self.dispatcher.drain()


def build_bot(
    config: AppConfig,
    alias_definitions: Mapping[str, AliasDefinition],
    chat: IChatClient | None = None,
    status_client: IStatusQueryClient | None = None,
) -> QueryBot:
    """Assemble a bot from configuration, using the Twitch and A2S clients by default.

    Raises:
        AliasResolutionError: If an alias cannot be bound to a command
    """
    if chat is None:
        chat = TwitchIrcClient(
            config.username,
            config.auth_token,
            host=config.irc.host,
            port=config.irc.port,
            reconnect_delay=config.irc.reconnect_delay,
        )
    if status_client is None:
        status_client = A2SStatusQueryClient(timeout=config.query.timeout)
    query_service = ServerQueryService(
        status_client,
        RetryPolicy(attempts=config.query.attempts, delay=config.query.retry_delay),
    )
    return QueryBot(config, chat, query_service, alias_definitions)
