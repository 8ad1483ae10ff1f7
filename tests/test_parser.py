import pytest

from tmi_ws import parser
from tmi_ws.exceptions import ParseError


def test_parse_privmsg_with_tags_and_emotes():
    raw = (
        "@badge-info=;badges=global_mod/1,turbo/1;color=#0D4200;display-name=ronni;"
        "emotes=25:0-4,12-16/1902:6-10;id=b34ccfc7-4977-403a-8a94-33c6bac34fb8;mod=0;"
        "room-id=1337;subscriber=0;tmi-sent-ts=1507246572675;turbo=1;user-id=1337;"
        "user-type=global_mod :ronni!ronni@ronni.tmi.twitch.tv PRIVMSG #ronni :Kappa Keepo Kappa"
    )
    message = parser.parse_irc_message(raw)
    assert message.raw == raw
    assert message.tags == {
        "badge-info": "",
        "badges": "global_mod/1,turbo/1",
        "color": "#0D4200",
        "display-name": "ronni",
        "emotes": "25:0-4,12-16/1902:6-10",
        "id": "b34ccfc7-4977-403a-8a94-33c6bac34fb8",
        "mod": "0",
        "room-id": "1337",
        "subscriber": "0",
        "tmi-sent-ts": "1507246572675",
        "turbo": "1",
        "user-id": "1337",
        "user-type": "global_mod",
    }
    assert message.prefix == "ronni!ronni@ronni.tmi.twitch.tv"
    assert message.command == "PRIVMSG"
    assert message.params == ["#ronni", "Kappa Keepo Kappa"]


def test_parse_clearchat_short_form():
    message = parser.parse_irc_message(":tmi.twitch.tv CLEARCHAT #dallas :ronni")
    assert message.tags == {}
    assert message.prefix == "tmi.twitch.tv"
    assert message.command == "CLEARCHAT"
    assert message.params == ["#dallas", "ronni"]


def test_parse_clearmsg():
    message = parser.parse_irc_message("@login=ronni;target-msg-id=abc-123-def :tmi.twitch.tv CLEARMSG #dallas :HeyGuys")
    assert message.tags == {"login": "ronni", "target-msg-id": "abc-123-def"}
    assert message.params == ["#dallas", "HeyGuys"]


def test_parse_globaluserstate_without_params():
    message = parser.parse_irc_message(
        "@badge-info=subscriber/8;badges=subscriber/6;color=#0D4200;display-name=dallas;"
        "emote-sets=0,33,50;turbo=0;user-id=1337;user-type=admin :tmi.twitch.tv GLOBALUSERSTATE"
    )
    assert message.command == "GLOBALUSERSTATE"
    assert message.params == []
    assert message.tags["emote-sets"] == "0,33,50"


def test_parse_without_prefix():
    message = parser.parse_irc_message("PING :tmi.twitch.tv")
    assert message.prefix == ""
    assert message.command == "PING"
    assert message.params == ["tmi.twitch.tv"]


def test_trailing_param_keeps_colons_and_collapses_spaces():
    message = parser.parse_irc_message(":nick!nick@host PRIVMSG #chan :see  you :at 10:30")
    assert message.params == ["#chan", "see you :at 10:30"]


def test_middle_params_before_trailing():
    message = parser.parse_irc_message(":tmi.twitch.tv 353 bot = #chan :alice bob")
    assert message.params == ["bot", "=", "#chan", "alice bob"]


def test_tag_values_are_unescaped():
    message = parser.parse_irc_message(r"@system-msg=5\sraiders\sfrom\:here;flag;dup=1;dup=2 :tmi.twitch.tv USERNOTICE #chan")
    assert message.tags["system-msg"] == "5 raiders from;here"
    assert message.tags["flag"] == ""
    assert message.tags["dup"] == "2"


@pytest.mark.parametrize(
    "line, reason",
    [
        ("", "empty line"),
        ("   ", "empty line"),
        ("@badges=turbo/1", "only tags"),
        ("@badges=turbo/1 :tmi.twitch.tv", "no command"),
        (":tmi.twitch.tv", "no command"),
    ],
)
def test_parse_errors(line, reason):
    with pytest.raises(ParseError) as excinfo:
        parser.parse_irc_message(line)
    assert excinfo.value.reason == reason
    assert excinfo.value.line == line


def test_parse_badges():
    badges = parser.parse_badges("subscriber/12,bits/1000,premium")
    assert badges == [
        parser.Badge("subscriber", "12"),
        parser.Badge("bits", "1000"),
        parser.Badge("premium", ""),
    ]
    assert parser.parse_badges("") == []
    assert parser.parse_badges(None) == []


def test_parse_emotes_slices_message():
    emotes = parser.parse_emotes("25:0-4,12-16/1902:6-10", "Kappa Keepo Kappa")
    assert emotes == [
        parser.Emote("25", 0, 4, "Kappa"),
        parser.Emote("25", 12, 16, "Kappa"),
        parser.Emote("1902", 6, 10, "Keepo"),
    ]


def test_parse_emotes_skips_malformed_groups():
    emotes = parser.parse_emotes("25:0-4,x-2/1902:6-10/bad", "Kappa Keepo")
    assert emotes == [parser.Emote("1902", 6, 10, "Keepo")]


def test_parse_emote_sets():
    assert parser.parse_emote_sets({"emote-sets": "0,33,50"}) == ["0", "33", "50"]
    assert parser.parse_emote_sets({}) == []
