"""Maps ``(prefix, command)`` to the :class:`MessageType` it is delivered as.

``MessageType.UNSET`` marks commands that are known but carry nothing worth
a typed message. Commands no table knows are reported as INVALIDIRC.
"""

from __future__ import annotations

from typing import Dict

from .messages import MessageType

TMI_PREFIX = "tmi.twitch.tv"
JTV_PREFIX = "jtv"

TMI_COMMANDS: Dict[str, MessageType] = {
    "001": MessageType.WELCOME,
    "002": MessageType.UNSET,
    "003": MessageType.UNSET,
    "004": MessageType.UNSET,
    "372": MessageType.UNSET,
    "375": MessageType.UNSET,
    "376": MessageType.UNSET,
    "421": MessageType.INVALIDIRC,
    "CAP": MessageType.UNSET,
    "SERVERCHANGE": MessageType.UNSET,
    "CLEARCHAT": MessageType.CLEARCHAT,
    "CLEARMSG": MessageType.CLEARMSG,
    "GLOBALUSERSTATE": MessageType.GLOBALUSERSTATE,
    "HOSTTARGET": MessageType.HOSTTARGET,
    "NOTICE": MessageType.NOTICE,
    "RECONNECT": MessageType.RECONNECT,
    "ROOMSTATE": MessageType.ROOMSTATE,
    "USERNOTICE": MessageType.USERNOTICE,
    "USERSTATE": MessageType.USERSTATE,
    "PING": MessageType.PING,
    "PONG": MessageType.PONG,
}

JTV_COMMANDS: Dict[str, MessageType] = {
    "MODE": MessageType.MODE,
}

OTHER_COMMANDS: Dict[str, MessageType] = {
    "353": MessageType.NAMES,
    "366": MessageType.UNSET,
    "JOIN": MessageType.JOIN,
    "PART": MessageType.PART,
    "PING": MessageType.PING,
    "PONG": MessageType.PONG,
    "PRIVMSG": MessageType.PRIVMSG,
    "WHISPER": MessageType.WHISPER,
}

TABLES: Dict[str, Dict[str, MessageType]] = {
    TMI_PREFIX: TMI_COMMANDS,
    JTV_PREFIX: JTV_COMMANDS,
}


def lookup(prefix: str, command: str) -> MessageType:
    table = TABLES.get(prefix)
    if table is not None and command in table:
        return table[command]
    return OTHER_COMMANDS.get(command, MessageType.INVALIDIRC)


__all__ = ["TMI_PREFIX", "JTV_PREFIX", "TMI_COMMANDS", "JTV_COMMANDS", "OTHER_COMMANDS", "lookup"]
