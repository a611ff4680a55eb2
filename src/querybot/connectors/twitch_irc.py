"""
Twitch chat client.

Runs the `irc` package's asyncio reactor on the bot's event loop. Channels are
joined once the server welcomes the bot, channel messages are handed to the
registered callbacks, and the connection is re-established whenever the
server closes it or asks for a reconnect.
"""

from __future__ import annotations

import asyncio
import logging

import irc.client
import irc.client_aio

from querybot.constants import (
    DEFAULT_RECONNECT_DELAY,
    MAX_RECONNECT_DELAY,
    TWITCH_IRC_HOST,
    TWITCH_IRC_PORT,
)
from querybot.core.common.exceptions import ChatTransportError
from querybot.core.interfaces.chat_client_interface import IChatClient, MessageCallback

logger = logging.getLogger(__name__)

LOGIN_FAILED_NOTICE = "Login authentication failed"

_SEND_ERRORS: tuple[type[Exception], ...] = (
    irc.client.ServerNotConnectedError,
    irc.client.MessageTooLong,
    irc.client.InvalidCharacters,
)


def _channel_name(channel: str) -> str:
    return channel.lstrip("#").lower()


class TwitchIrcClient(IChatClient):
    """IRC client for Twitch chat that reconnects until closed."""

    def __init__(
        self,
        username: str,
        auth_token: str,
        host: str = TWITCH_IRC_HOST,
        port: int = TWITCH_IRC_PORT,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        max_reconnect_delay: float = MAX_RECONNECT_DELAY,
    ) -> None:
        self._username = username.lower()
        self._auth_token = (
            auth_token if auth_token.startswith("oauth:") else f"oauth:{auth_token}"
        )
        self._host = host
        self._port = port
        self._reconnect_delay = reconnect_delay
        self._max_reconnect_delay = max(max_reconnect_delay, reconnect_delay)
        self._callbacks: list[MessageCallback] = []
        self._channels: list[str] = []
        self._reactor: irc.client_aio.AioReactor | None = None
        self._connection: irc.client_aio.AioConnection | None = None
        self._stopped: asyncio.Future[None] | None = None
        self._reconnect_task: asyncio.Task | None = None
        self._callback_tasks: set[asyncio.Task] = set()
        self._closing = False

    def on_message(self, callback: MessageCallback) -> None:
        self._callbacks.append(callback)

    async def send(self, channel: str, text: str) -> None:
        if self._connection is None or not self._connection.is_connected():
            raise ChatTransportError("Not connected")
        # IRC lines cannot carry line breaks
        text = " ".join(text.splitlines())
        target = f"#{_channel_name(channel)}"
        try:
            self._connection.privmsg(target, text)
        except _SEND_ERRORS as e:
            raise ChatTransportError(f"Could not send to {target}: {e}") from e

    async def join(self, channel: str) -> None:
        name = _channel_name(channel)
        if name not in self._channels:
            self._channels.append(name)
        if self._connection is not None and self._connection.is_connected():
            self._connection.join(f"#{name}")

    async def connect(self) -> None:
        """Connect and process chat until `close()` or a login failure.

        Raises:
            ChatTransportError: If the first connection cannot be opened or
                the server rejects the credentials
        """
        loop = asyncio.get_running_loop()
        self._closing = False
        self._stopped = loop.create_future()
        self._reactor = irc.client_aio.AioReactor(loop=loop)
        for event, handler in (
            ("welcome", self._on_welcome),
            ("pubmsg", self._on_pubmsg),
            ("privnotice", self._on_privnotice),
            ("reconnect", self._on_reconnect),
            ("disconnect", self._on_disconnect),
        ):
            self._reactor.add_global_handler(event, handler)
        self._connection = self._reactor.server()

        try:
            await self._open()
            await self._stopped
        finally:
            await self.close()

    async def _open(self) -> None:
        assert self._connection is not None
        try:
            await self._connection.connect(
                self._host, self._port, self._username, password=self._auth_token
            )
        except (OSError, irc.client.ServerConnectionError) as e:
            raise ChatTransportError(
                f"Could not connect to {self._host}:{self._port}: {e}"
            ) from e
        logger.info("Connected to %s:%d", self._host, self._port)

    async def _reconnect(self) -> None:
        delay = self._reconnect_delay
        while not self._closing:
            await asyncio.sleep(delay)
            if self._closing:
                return
            try:
                await self._open()
                return
            except ChatTransportError as e:
                delay = min(delay * 2, self._max_reconnect_delay)
                logger.warning("%s; retrying in %.1fs", e.message, delay)

    def _on_welcome(
        self, connection: irc.client_aio.AioConnection, event: irc.client.Event
    ) -> None:
        for name in self._channels:
            logger.debug("Joining #%s", name)
            connection.join(f"#{name}")

    def _on_pubmsg(
        self, connection: irc.client_aio.AioConnection, event: irc.client.Event
    ) -> None:
        assert self._reactor is not None
        sender = event.source.nick
        channel = _channel_name(event.target)
        text = event.arguments[0]
        for callback in self._callbacks:
            task = self._reactor.loop.create_task(callback(sender, channel, text))
            self._callback_tasks.add(task)
            task.add_done_callback(self._callback_done)

    def _callback_done(self, task: asyncio.Task) -> None:
        self._callback_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Message callback failed", exc_info=exc)

    def _on_privnotice(
        self, connection: irc.client_aio.AioConnection, event: irc.client.Event
    ) -> None:
        text = event.arguments[0] if event.arguments else ""
        if LOGIN_FAILED_NOTICE in text:
            self._fail(ChatTransportError("Twitch login authentication failed"))
            return
        logger.info("Notice from server: %s", text)

    def _on_reconnect(
        self, connection: irc.client_aio.AioConnection, event: irc.client.Event
    ) -> None:
        logger.info("Server requested a reconnect")
        connection.disconnect("Reconnecting")

    def _on_disconnect(
        self, connection: irc.client_aio.AioConnection, event: irc.client.Event
    ) -> None:
        if self._closing:
            logger.info("Chat connection closed")
            return
        logger.warning(
            "Chat connection lost, reconnecting in %.1fs", self._reconnect_delay
        )
        if self._reconnect_task is None or self._reconnect_task.done():
            assert self._reactor is not None
            self._reconnect_task = self._reactor.loop.create_task(self._reconnect())

    def _fail(self, error: ChatTransportError) -> None:
        self._closing = True
        if self._stopped is not None and not self._stopped.done():
            self._stopped.set_exception(error)

    async def close(self) -> None:
        """Disconnect and stop reconnecting; `connect()` then returns."""
        self._closing = True
        if self._reconnect_task is not None and not self._reconnect_task.done():
            self._reconnect_task.cancel()
        if self._connection is not None and self._connection.is_connected():
            self._connection.disconnect("Bye")
        if self._stopped is not None and not self._stopped.done():
            self._stopped.set_result(None)
