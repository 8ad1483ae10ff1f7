"""Typed records built from parsed IRC lines.

Every message keeps the originating :class:`IRCData` in ``data`` and the raw
command token in ``irc_type``; ``type`` is fixed per class.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, ClassVar, Dict, List, Optional

from .parser import Badge, Emote, IRCData, parse_badges, parse_emote_sets, parse_emotes
from . import utils


class MessageType(IntEnum):
    UNSET = -1
    WELCOME = 0
    INVALIDIRC = 1
    CLEARCHAT = 2
    CLEARMSG = 3
    GLOBALUSERSTATE = 4
    HOSTTARGET = 5
    NOTICE = 6
    RECONNECT = 7
    ROOMSTATE = 8
    USERNOTICE = 9
    USERSTATE = 10
    MODE = 11
    NAMES = 12
    JOIN = 13
    PART = 14
    PING = 15
    PONG = 16
    PRIVMSG = 17
    WHISPER = 18


LOGIN_FAILURES = (
    "Login unsuccessful",
    "Login authentication failed",
    "Error logging in",
    "Improperly formatted auth",
    "Invalid NICK",
)

ROOMSTATE_MODES = ("emote-only", "followers-only", "r9k", "rituals", "slow", "subs-only")


@dataclass(frozen=True, slots=True)
class User:
    id: str = ""
    name: str = ""
    display_name: str = ""
    color: str = ""
    badges: List[Badge] = field(default_factory=list)
    badge_info: List[Badge] = field(default_factory=list)
    emotes: List[Emote] = field(default_factory=list)
    flags: str = ""
    room_id: str = ""
    user_type: str = ""
    bits: int = 0
    broadcaster: bool = False
    mod: bool = False
    subscriber: bool = False
    turbo: bool = False
    vip: bool = False


@dataclass(frozen=True, slots=True)
class RoomState:
    mode: str
    enabled: bool = False
    delay: int = 0  # seconds for slow, minutes for followers-only


@dataclass(slots=True)
class Message:
    data: IRCData
    irc_type: str

    type: ClassVar[MessageType] = MessageType.UNSET


@dataclass(slots=True)
class UnsetMessage(Message):
    text: str = ""

    type: ClassVar[MessageType] = MessageType.UNSET


@dataclass(slots=True)
class WelcomeMessage(Message):
    text: str = ""

    type: ClassVar[MessageType] = MessageType.WELCOME


@dataclass(slots=True)
class InvalidIRCMessage(Message):
    text: str = ""
    unknown: str = ""  # the rejected or unrecognized command
    user: str = ""
    error: Optional[Exception] = None

    type: ClassVar[MessageType] = MessageType.INVALIDIRC


@dataclass(slots=True)
class ClearChatMessage(Message):
    channel: str = ""
    text: str = ""
    target: str = ""
    ban_duration: Optional[int] = None  # seconds; None when permanent or a full clear

    type: ClassVar[MessageType] = MessageType.CLEARCHAT


@dataclass(slots=True)
class ClearMsgMessage(Message):
    channel: str = ""
    text: str = ""
    login: str = ""
    target_msg_id: str = ""

    type: ClassVar[MessageType] = MessageType.CLEARMSG


@dataclass(slots=True)
class GlobalUserstateMessage(Message):
    emote_sets: List[str] = field(default_factory=list)
    user: User = field(default_factory=User)

    type: ClassVar[MessageType] = MessageType.GLOBALUSERSTATE


@dataclass(slots=True)
class HostTargetMessage(Message):
    channel: str = ""
    text: str = ""
    hosted: str = ""
    viewers: int = 0

    type: ClassVar[MessageType] = MessageType.HOSTTARGET


@dataclass(slots=True)
class NoticeMessage(Message):
    channel: str = ""
    text: str = ""
    msg_id: str = ""
    notice: str = "notice"
    on: bool = False
    mods: List[str] = field(default_factory=list)
    vips: List[str] = field(default_factory=list)

    type: ClassVar[MessageType] = MessageType.NOTICE


@dataclass(slots=True)
class ReconnectMessage(Message):
    type: ClassVar[MessageType] = MessageType.RECONNECT


@dataclass(slots=True)
class RoomstateMessage(Message):
    channel: str = ""
    room_id: str = ""
    states: Dict[str, RoomState] = field(default_factory=dict)

    type: ClassVar[MessageType] = MessageType.ROOMSTATE


@dataclass(slots=True)
class UsernoticeMessage(Message):
    channel: str = ""
    text: str = ""
    msg_id: str = ""
    msg_params: Dict[str, str] = field(default_factory=dict)
    system_msg: str = ""
    emotes: List[Emote] = field(default_factory=list)
    user: User = field(default_factory=User)

    type: ClassVar[MessageType] = MessageType.USERNOTICE


@dataclass(slots=True)
class UserstateMessage(Message):
    channel: str = ""
    emote_sets: List[str] = field(default_factory=list)
    user: User = field(default_factory=User)

    type: ClassVar[MessageType] = MessageType.USERSTATE


@dataclass(slots=True)
class ModeMessage(Message):
    channel: str = ""
    mode: str = ""
    username: str = ""

    type: ClassVar[MessageType] = MessageType.MODE


@dataclass(slots=True)
class NamesMessage(Message):
    channel: str = ""
    users: List[str] = field(default_factory=list)

    type: ClassVar[MessageType] = MessageType.NAMES


@dataclass(slots=True)
class JoinMessage(Message):
    channel: str = ""
    username: str = ""

    type: ClassVar[MessageType] = MessageType.JOIN


@dataclass(slots=True)
class PartMessage(Message):
    channel: str = ""
    username: str = ""

    type: ClassVar[MessageType] = MessageType.PART


@dataclass(slots=True)
class PingMessage(Message):
    text: str = ""

    type: ClassVar[MessageType] = MessageType.PING


@dataclass(slots=True)
class PongMessage(Message):
    text: str = ""

    type: ClassVar[MessageType] = MessageType.PONG


@dataclass(slots=True)
class PrivmsgMessage(Message):
    channel: str = ""
    text: str = ""
    id: str = ""
    action: bool = False
    reply: bool = False
    bits: int = 0
    emotes: List[Emote] = field(default_factory=list)
    user: User = field(default_factory=User)

    type: ClassVar[MessageType] = MessageType.PRIVMSG


@dataclass(slots=True)
class WhisperMessage(Message):
    target: str = ""
    text: str = ""
    id: str = ""
    action: bool = False
    emotes: List[Emote] = field(default_factory=list)
    user: User = field(default_factory=User)

    type: ClassVar[MessageType] = MessageType.WHISPER


def _channel(data: IRCData, index: int = 0) -> str:
    value = data.param(index)
    return utils.channel(value) if value else ""


def _int(value: Optional[str], default: int = 0) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


def parse_user(data: IRCData, emotes: Optional[List[Emote]] = None) -> User:
    """Decode the sender of a tagged message.

    ``name`` prefers the lower-cased display name, then the ``login`` tag,
    then the nick of the prefix.
    """
    tags = data.tags
    display_name = tags.get("display-name", "")
    if display_name:
        name = display_name.lower()
    else:
        name = tags.get("login") or utils.username_from_prefix(data.prefix)

    badges = parse_badges(tags.get("badges"))
    names = {badge.name for badge in badges}
    return User(
        id=tags.get("user-id", ""),
        name=name,
        display_name=display_name,
        color=tags.get("color", ""),
        badges=badges,
        badge_info=parse_badges(tags.get("badge-info")),
        emotes=list(emotes or []),
        flags=tags.get("flags", ""),
        room_id=tags.get("room-id", ""),
        user_type=tags.get("user-type", ""),
        bits=_int(tags.get("bits")),
        broadcaster="broadcaster" in names,
        mod=tags.get("mod") == "1" or "moderator" in names,
        subscriber=tags.get("subscriber") == "1" or "subscriber" in names,
        turbo=tags.get("turbo") == "1" or "turbo" in names,
        vip="vip" in names,
    )


def parse_unset_message(data: IRCData) -> UnsetMessage:
    return UnsetMessage(data=data, irc_type=data.command, text=data.raw)


def parse_welcome_message(data: IRCData) -> WelcomeMessage:
    return WelcomeMessage(data=data, irc_type=data.command, text=data.param(1, "") or "")


def parse_invalid_irc_message(data: IRCData) -> InvalidIRCMessage:
    # 421 ERR_UNKNOWNCOMMAND: <user> <command> :Unknown command
    if data.command == "421":
        return InvalidIRCMessage(
            data=data,
            irc_type=data.command,
            text=data.param(2, "") or "",
            unknown=data.param(1, "") or "",
            user=data.param(0, "") or "",
        )
    return InvalidIRCMessage(
        data=data,
        irc_type=data.command,
        text=data.raw,
        unknown=data.command,
        user=utils.username_from_prefix(data.prefix),
    )


def invalid_line_message(line: str, error: Exception) -> InvalidIRCMessage:
    """Wrap a line that could not be parsed at all."""
    return InvalidIRCMessage(data=IRCData(raw=line), irc_type="", text=line, error=error)


def parse_clearchat_message(data: IRCData) -> ClearChatMessage:
    message = ClearChatMessage(data=data, irc_type=data.command, channel=_channel(data))
    if len(data.params) == 2:
        message.target = data.params[1]
        duration = data.tags.get("ban-duration")
        if duration is not None and duration.isdigit():
            message.ban_duration = int(duration)
            message.text = f"{message.target} timed out for {duration} seconds in {message.channel}"
        else:
            message.text = f"{message.target} was permanently banned in {message.channel}"
    else:
        message.text = f"chat cleared in {message.channel}"
    return message


def parse_clearmsg_message(data: IRCData) -> ClearMsgMessage:
    return ClearMsgMessage(
        data=data,
        irc_type=data.command,
        channel=_channel(data),
        text=data.param(1, "") or "",
        login=data.tags.get("login", ""),
        target_msg_id=data.tags.get("target-msg-id", ""),
    )


def parse_globaluserstate_message(data: IRCData) -> GlobalUserstateMessage:
    return GlobalUserstateMessage(
        data=data,
        irc_type=data.command,
        emote_sets=parse_emote_sets(data.tags),
        user=parse_user(data),
    )


def parse_hosttarget_message(data: IRCData) -> HostTargetMessage:
    message = HostTargetMessage(data=data, irc_type=data.command, channel=_channel(data))
    fields = (data.param(1, "") or "").split()
    viewers = ""
    if fields:
        if fields[0] != "-":
            message.hosted = fields[0]
        if len(fields) > 1:
            viewers = fields[1]
            message.viewers = _int(viewers)

    if message.hosted:
        text = f"{message.channel} is now hosting {message.hosted}"
    else:
        text = f"{message.channel} exited host mode"
    if viewers:
        text += f" with {viewers} viewers"
    message.text = text
    return message


def _names_after_colon(text: str) -> List[str]:
    # "The moderators of this room are: mod1, mod2"
    parts = text.split(": ")
    if len(parts) != 2:
        return []
    listed = parts[1].rstrip(".").lower()
    return [name for name in listed.split(", ") if name]


def parse_notice_message(data: IRCData) -> NoticeMessage:
    """Decode a NOTICE.

    ``msg_id`` is the ``msg-id`` tag. Without one, a login rejection text
    yields ``login_failure`` and anything else ``parse_error``.
    """
    message = NoticeMessage(data=data, irc_type=data.command, channel=_channel(data))
    text = data.param(1, "") or ""
    message.text = text

    msg_id = data.tags.get("msg-id")
    if msg_id is None:
        if any(failure in text for failure in LOGIN_FAILURES):
            message.msg_id = "login_failure"
        else:
            message.msg_id = "parse_error"
        return message

    message.msg_id = msg_id
    if msg_id in {"msg_rejected", "msg_rejected_mandatory"}:
        message.notice = "automod"
    elif msg_id in {"emote_only_on", "emote_only_off"}:
        message.notice = "emoteonly"
        message.on = msg_id.endswith("_on")
    elif msg_id in {"r9k_on", "r9k_off"}:
        message.notice = "uniquechat"
        message.on = msg_id.endswith("_on")
    elif msg_id in {"subs_on", "subs_off"}:
        message.notice = "subonly"
        message.on = msg_id.endswith("_on")
    elif msg_id == "no_mods":
        message.notice = "mods"
    elif msg_id == "room_mods":
        message.notice = "mods"
        message.mods = _names_after_colon(text)
    elif msg_id == "no_vips":
        message.notice = "vips"
    elif msg_id == "vips_success":
        message.notice = "vips"
        message.vips = _names_after_colon(text)
    return message


def parse_reconnect_message(data: IRCData) -> ReconnectMessage:
    return ReconnectMessage(data=data, irc_type=data.command)


def parse_roomstate_message(data: IRCData) -> RoomstateMessage:
    message = RoomstateMessage(
        data=data,
        irc_type=data.command,
        channel=_channel(data),
        room_id=data.tags.get("room-id", ""),
    )
    for mode in ROOMSTATE_MODES:
        raw = data.tags.get(mode)
        if raw is None:
            continue
        try:
            value = int(raw)
        except ValueError:
            message.states[mode] = RoomState(mode=mode)
            continue
        if mode == "followers-only":
            # -1 disabled, 0 enabled without delay, n minutes after following
            state = RoomState(mode=mode, enabled=value >= 0, delay=max(value, 0))
        elif mode == "slow":
            state = RoomState(mode=mode, enabled=value != 0, delay=value)
        else:
            state = RoomState(mode=mode, enabled=value == 1)
        message.states[mode] = state
    return message


def parse_usernotice_message(data: IRCData) -> UsernoticeMessage:
    text = data.param(1, "") or ""
    emotes = parse_emotes(data.tags.get("emotes"), text)
    return UsernoticeMessage(
        data=data,
        irc_type=data.command,
        channel=_channel(data),
        text=text,
        msg_id=data.tags.get("msg-id", ""),
        msg_params={key: value for key, value in data.tags.items() if key.startswith("msg-param")},
        system_msg=data.tags.get("system-msg", ""),
        emotes=emotes,
        user=parse_user(data, emotes),
    )


def parse_userstate_message(data: IRCData) -> UserstateMessage:
    return UserstateMessage(
        data=data,
        irc_type=data.command,
        channel=_channel(data),
        emote_sets=parse_emote_sets(data.tags),
        user=parse_user(data),
    )


def parse_mode_message(data: IRCData) -> ModeMessage:
    return ModeMessage(
        data=data,
        irc_type=data.command,
        channel=_channel(data),
        mode=data.param(1, "") or "",
        username=data.param(2, "") or "",
    )


def parse_names_message(data: IRCData) -> NamesMessage:
    # 353 <nick> = #channel :name name name
    message = NamesMessage(data=data, irc_type=data.command)
    if len(data.params) == 4:
        message.channel = _channel(data, 2)
        message.users = data.params[3].split()
    return message


def parse_join_message(data: IRCData) -> JoinMessage:
    return JoinMessage(
        data=data,
        irc_type=data.command,
        channel=_channel(data),
        username=utils.username_from_prefix(data.prefix),
    )


def parse_part_message(data: IRCData) -> PartMessage:
    return PartMessage(
        data=data,
        irc_type=data.command,
        channel=_channel(data),
        username=utils.username_from_prefix(data.prefix),
    )


def parse_ping_message(data: IRCData) -> PingMessage:
    return PingMessage(data=data, irc_type=data.command, text=data.param(-1, "") or "")


def parse_pong_message(data: IRCData) -> PongMessage:
    return PongMessage(data=data, irc_type=data.command, text=data.param(-1, "") or "")


def parse_privmsg_message(data: IRCData) -> PrivmsgMessage:
    text = data.param(1, "") or ""
    action = utils.action_message(text)
    if action:
        text = action.group(1)
    emotes = parse_emotes(data.tags.get("emotes"), text)
    return PrivmsgMessage(
        data=data,
        irc_type=data.command,
        channel=_channel(data),
        text=text,
        id=data.tags.get("id", ""),
        action=action is not None,
        reply="reply-parent-msg-id" in data.tags,
        bits=_int(data.tags.get("bits")),
        emotes=emotes,
        user=parse_user(data, emotes),
    )


def parse_whisper_message(data: IRCData) -> WhisperMessage:
    raw_text = data.param(1, "") or ""
    # emote positions index the text as sent, "/me " included
    emotes = parse_emotes(data.tags.get("emotes"), raw_text)
    action = raw_text.startswith("/me ")
    text = raw_text[len("/me ") :] if action else raw_text
    return WhisperMessage(
        data=data,
        irc_type=data.command,
        target=data.param(0, "") or "",
        text=text,
        id=data.tags.get("message-id", ""),
        action=action,
        emotes=emotes,
        user=parse_user(data, emotes),
    )


BUILDERS: Dict[MessageType, Callable[[IRCData], Message]] = {
    MessageType.UNSET: parse_unset_message,
    MessageType.WELCOME: parse_welcome_message,
    MessageType.INVALIDIRC: parse_invalid_irc_message,
    MessageType.CLEARCHAT: parse_clearchat_message,
    MessageType.CLEARMSG: parse_clearmsg_message,
    MessageType.GLOBALUSERSTATE: parse_globaluserstate_message,
    MessageType.HOSTTARGET: parse_hosttarget_message,
    MessageType.NOTICE: parse_notice_message,
    MessageType.RECONNECT: parse_reconnect_message,
    MessageType.ROOMSTATE: parse_roomstate_message,
    MessageType.USERNOTICE: parse_usernotice_message,
    MessageType.USERSTATE: parse_userstate_message,
    MessageType.MODE: parse_mode_message,
    MessageType.NAMES: parse_names_message,
    MessageType.JOIN: parse_join_message,
    MessageType.PART: parse_part_message,
    MessageType.PING: parse_ping_message,
    MessageType.PONG: parse_pong_message,
    MessageType.PRIVMSG: parse_privmsg_message,
    MessageType.WHISPER: parse_whisper_message,
}


def build_message(message_type: MessageType, data: IRCData) -> Message:
    return BUILDERS[message_type](data)


__all__ = [
    "MessageType",
    "User",
    "RoomState",
    "Message",
    "UnsetMessage",
    "WelcomeMessage",
    "InvalidIRCMessage",
    "ClearChatMessage",
    "ClearMsgMessage",
    "GlobalUserstateMessage",
    "HostTargetMessage",
    "NoticeMessage",
    "ReconnectMessage",
    "RoomstateMessage",
    "UsernoticeMessage",
    "UserstateMessage",
    "ModeMessage",
    "NamesMessage",
    "JoinMessage",
    "PartMessage",
    "PingMessage",
    "PongMessage",
    "PrivmsgMessage",
    "WhisperMessage",
    "parse_user",
    "invalid_line_message",
    "build_message",
    "BUILDERS",
]
