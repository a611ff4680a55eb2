import asyncio

import pytest
from querybot.core.common.exceptions import ConfigurationError
from querybot.core.domain.alias import ResolvedAlias
from querybot.core.domain.commands.base_command import BaseCommand
from querybot.core.services.alias_service import AliasRegistry
from querybot.core.services.command_service import CommandRegistry
from querybot.core.services.dispatcher import CommandDispatcher


class RecordingCommand(BaseCommand):
    def __init__(self, name: str, log: list | None = None) -> None:
        self._name = name
        self.log = log if log is not None else []

    @property
    def name(self) -> str:
        return self._name

    @property
    def format(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return "records invocations"

    async def invoke(self, sender: str, channel: str, args: str) -> None:
        self.log.append((self._name, sender, channel, args))


class BlockingCommand(RecordingCommand):
    def __init__(self, name: str, release: asyncio.Event) -> None:
        super().__init__(name)
        self.release = release

    async def invoke(self, sender: str, channel: str, args: str) -> None:
        await self.release.wait()
        await super().invoke(sender, channel, args)


class FailingCommand(RecordingCommand):
    async def invoke(self, sender: str, channel: str, args: str) -> None:
        raise RuntimeError("boom")


def _registry(*commands: BaseCommand) -> CommandRegistry:
    registry = CommandRegistry()
    for command in commands:
        registry.register(command)
    registry.freeze()
    return registry


@pytest.fixture
def log() -> list:
    return []


@pytest.fixture
def dispatcher(log: list) -> CommandDispatcher:
    info = RecordingCommand("info", log)
    online = RecordingCommand("online", log)
    commands = _registry(info, online)
    aliases = AliasRegistry(
        {
            "srv": ResolvedAlias("srv", info, "%s:27015"),
            "home": ResolvedAlias("home", info, "10.0.0.1:27015"),
        }
    )
    return CommandDispatcher(commands, aliases, "!")


@pytest.mark.asyncio
async def test_dispatch_command_passes_remainder(
    dispatcher: CommandDispatcher, log: list
) -> None:
    invoked = await dispatcher.dispatch("alice", "chan", "!info 1.2.3.4:27015")

    assert invoked == 1
    assert log == [("info", "alice", "chan", "1.2.3.4:27015")]


@pytest.mark.asyncio
async def test_dispatch_unrelated_text_is_ignored(
    dispatcher: CommandDispatcher, log: list
) -> None:
    assert await dispatcher.dispatch("alice", "chan", "hello") == 0
    assert await dispatcher.dispatch("alice", "chan", "!nothing here") == 0
    assert log == []


@pytest.mark.asyncio
async def test_dispatch_alias_substitutes_into_template(
    dispatcher: CommandDispatcher, log: list
) -> None:
    await dispatcher.dispatch("bob", "chan", "!srv 1.2.3.4")
    await dispatcher.dispatch("bob", "chan", "!home whatever")

    assert log == [
        ("info", "bob", "chan", "1.2.3.4:27015"),
        ("info", "bob", "chan", "10.0.0.1:27015"),
    ]


@pytest.mark.asyncio
async def test_key_in_both_registries_runs_command_then_alias(log: list) -> None:
    info = RecordingCommand("info", log)
    commands = _registry(info)
    aliases = AliasRegistry({"info": ResolvedAlias("info", info, "aliased %s")})
    dispatcher = CommandDispatcher(commands, aliases, "!")

    invoked = await dispatcher.dispatch("carl", "chan", "!info x")

    assert invoked == 2
    assert log == [
        ("info", "carl", "chan", "x"),
        ("info", "carl", "chan", "aliased x"),
    ]


def test_match(dispatcher: CommandDispatcher) -> None:
    assert dispatcher.match("!online 1.2.3.4:27015 Bob;Carl") == (
        "online",
        "1.2.3.4:27015 Bob;Carl",
    )
    assert dispatcher.match("!infox") is None


def test_dispatcher_without_keys_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        CommandDispatcher(_registry(), AliasRegistry(), "!")


@pytest.mark.asyncio
async def test_slow_handler_does_not_block_later_messages(log: list) -> None:
    release = asyncio.Event()
    slow = BlockingCommand("slow", release)
    fast = RecordingCommand("fast", log)
    dispatcher = CommandDispatcher(_registry(slow, fast), AliasRegistry(), "!")

    slow_task = dispatcher.on_message("alice", "chan", "!slow")
    fast_task = dispatcher.on_message("bob", "chan", "!fast")
    assert slow_task is not None and fast_task is not None

    await fast_task
    assert log == [("fast", "bob", "chan", "")]
    assert not slow_task.done()

    release.set()
    await dispatcher.drain()
    assert slow.log == [("slow", "alice", "chan", "")]


@pytest.mark.asyncio
async def test_unmatched_message_creates_no_task(dispatcher: CommandDispatcher) -> None:
    assert dispatcher.on_message("alice", "chan", "hello") is None


@pytest.mark.asyncio
async def test_handler_failure_is_contained(log: list) -> None:
    dispatcher = CommandDispatcher(
        _registry(FailingCommand("bad"), RecordingCommand("ok", log)),
        AliasRegistry(),
        "!",
    )

    await dispatcher.handle_message("alice", "chan", "!bad")
    await dispatcher.handle_message("alice", "chan", "!ok")
    await dispatcher.drain()

    assert log == [("ok", "alice", "chan", "")]
