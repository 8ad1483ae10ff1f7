import pytest

from tmi_ws.dispatch import lookup
from tmi_ws.messages import MessageType


@pytest.mark.parametrize(
    "prefix, command, expected",
    [
        ("tmi.twitch.tv", "001", MessageType.WELCOME),
        ("tmi.twitch.tv", "NOTICE", MessageType.NOTICE),
        ("tmi.twitch.tv", "RECONNECT", MessageType.RECONNECT),
        ("tmi.twitch.tv", "PONG", MessageType.PONG),
        ("tmi.twitch.tv", "421", MessageType.INVALIDIRC),
        ("jtv", "MODE", MessageType.MODE),
        ("ronni!ronni@ronni.tmi.twitch.tv", "PRIVMSG", MessageType.PRIVMSG),
        ("ronni!ronni@ronni.tmi.twitch.tv", "JOIN", MessageType.JOIN),
        ("bot.tmi.twitch.tv", "353", MessageType.NAMES),
        ("", "PING", MessageType.PING),
    ],
)
def test_known_commands(prefix, command, expected):
    assert lookup(prefix, command) is expected


@pytest.mark.parametrize(
    "prefix, command",
    [
        ("tmi.twitch.tv", "002"),
        ("tmi.twitch.tv", "003"),
        ("tmi.twitch.tv", "004"),
        ("tmi.twitch.tv", "372"),
        ("tmi.twitch.tv", "375"),
        ("tmi.twitch.tv", "376"),
        ("tmi.twitch.tv", "CAP"),
        ("tmi.twitch.tv", "SERVERCHANGE"),
        ("bot.tmi.twitch.tv", "366"),
    ],
)
def test_ignored_commands(prefix, command):
    assert lookup(prefix, command) is MessageType.UNSET


def test_prefix_table_falls_back_to_user_commands():
    # WHISPER is only listed for user prefixes
    assert lookup("tmi.twitch.tv", "WHISPER") is MessageType.WHISPER
    assert lookup("jtv", "PRIVMSG") is MessageType.PRIVMSG


def test_unknown_commands():
    assert lookup("tmi.twitch.tv", "FOO") is MessageType.INVALIDIRC
    assert lookup("someone!someone@host", "CLEARCHAT") is MessageType.INVALIDIRC
