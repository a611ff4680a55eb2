import pytest
from querybot.core.domain.commands.alias_command import AliasCommand
from querybot.core.domain.commands.help_command import HelpCommand


@pytest.fixture
def handlers(chat) -> dict:
    alias = AliasCommand(chat)
    return {"online": alias, "info": alias, "srv": alias, "help": alias}


@pytest.mark.asyncio
async def test_help_lists_sorted_names(chat, handlers) -> None:
    command = HelpCommand(chat, lambda: handlers)

    await command.invoke("alice", "chan", "")

    assert chat.sent == [("chan", "Available commands: help, info, online, srv")]


@pytest.mark.asyncio
async def test_help_without_commands(chat) -> None:
    await HelpCommand(chat, dict).invoke("alice", "chan", "")

    assert chat.sent == [("chan", "No commands available.")]


@pytest.mark.asyncio
async def test_help_describes_a_single_command(chat) -> None:
    handlers: dict = {}
    command = HelpCommand(chat, lambda: handlers)
    handlers["help"] = command

    await command.invoke("alice", "chan", "help")

    assert chat.sent == [
        (
            "chan",
            "help - Show available commands or details for a single command"
            " | Format: help [<command>]"
            " | Examples: !help, !help info",
        )
    ]


@pytest.mark.asyncio
async def test_help_omits_examples_when_there_are_none(chat) -> None:
    alias = AliasCommand(chat)

    await HelpCommand(chat, lambda: {"alias": alias}).invoke("alice", "chan", " alias ")

    assert chat.sent == [
        ("chan", f"alias - {alias.description} | Format: {alias.format}")
    ]


@pytest.mark.asyncio
async def test_help_for_unknown_command(chat) -> None:
    await HelpCommand(chat, dict).invoke("alice", "chan", "nope")

    assert chat.sent == [("chan", "Unknown command: nope")]


@pytest.mark.asyncio
async def test_alias_command_is_not_implemented(chat) -> None:
    command = AliasCommand(chat)

    await command.invoke("alice", "chan", "set foo info %s")

    assert command.name == "alias"
    assert chat.sent == [("chan", "NOT IMPLEMENTED")]
