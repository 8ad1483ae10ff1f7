from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .exceptions import ParseError
from . import utils


@dataclass(slots=True)
class IRCData:
    """One parsed IRC line: tags, prefix, command and params."""

    raw: str
    tags: Dict[str, str] = field(default_factory=dict)
    prefix: str = ""
    command: str = ""
    params: List[str] = field(default_factory=list)

    def param(self, index: int, default: Optional[str] = None) -> Optional[str]:
        try:
            return self.params[index]
        except IndexError:
            return default


@dataclass(frozen=True, slots=True)
class Badge:
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class Emote:
    id: str
    start: int
    end: int
    raw: str


def parse_tags(raw_tags: str) -> Dict[str, str]:
    """Parse ``key=value;key2`` into a mapping; later duplicates win."""
    tags: Dict[str, str] = {}
    for tag in raw_tags.removeprefix("@").split(";"):
        key, _, value = tag.partition("=")
        tags[key] = utils.unescape_irc(value)
    return tags


def parse_irc_message(line: str) -> IRCData:
    """Parse a single IRC line (CR/LF already stripped).

    Raises ``ParseError`` when the line is empty or carries no command.
    """
    data = IRCData(raw=line)
    fields = line.split()
    if not fields:
        raise ParseError("empty line", line)

    index = 0
    if fields[index].startswith("@"):
        data.tags = parse_tags(fields[index])
        index += 1
        if index == len(fields):
            raise ParseError("only tags", line)

    if fields[index].startswith(":"):
        data.prefix = fields[index][1:]
        index += 1
        if index == len(fields):
            raise ParseError("no command", line)

    data.command = fields[index]
    index += 1

    for position in range(index, len(fields)):
        if fields[position].startswith(":"):
            data.params = fields[index:position]
            data.params.append(" ".join(fields[position:])[1:])
            break
    else:
        data.params = fields[index:]

    return data


def parse_badges(raw: Optional[str]) -> List[Badge]:
    badges: List[Badge] = []
    for part in (raw or "").split(","):
        if not part:
            continue
        name, _, value = part.partition("/")
        badges.append(Badge(name=name, value=value))
    return badges


def parse_emotes(raw: Optional[str], message: str) -> List[Emote]:
    """Decode ``id:start-end,start-end/id2:start-end`` against ``message``.

    Positions index code points of the message. An emote group with a
    malformed position is skipped.
    """
    emotes: List[Emote] = []
    for group in (raw or "").split("/"):
        emote_id, sep, positions = group.partition(":")
        if not sep or not positions:
            continue
        decoded: List[Emote] = []
        for position in positions.split(","):
            start, sep, end = position.partition("-")
            if not sep or not start.isdigit() or not end.isdigit():
                decoded = []
                break
            first, last = int(start), int(end)
            decoded.append(Emote(id=emote_id, start=first, end=last, raw=message[first : last + 1]))
        emotes.extend(decoded)
    return emotes


def parse_emote_sets(tags: Dict[str, str]) -> List[str]:
    sets = tags.get("emote-sets")
    if not sets:
        return []
    return sets.split(",")


__all__ = [
    "IRCData",
    "Badge",
    "Emote",
    "parse_irc_message",
    "parse_tags",
    "parse_badges",
    "parse_emotes",
    "parse_emote_sets",
]
