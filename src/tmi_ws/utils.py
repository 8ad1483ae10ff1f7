from __future__ import annotations

import random
import re
from typing import Optional

ACTION_MESSAGE_REGEX = re.compile(r"^\u0001ACTION ([^\u0001]+)\u0001$")
TOKEN_REGEX = re.compile(r"^oauth:", re.IGNORECASE)
ANONYMOUS_PREFIX = "justinfan"
IRC_ESCAPED_CHARS = {":": ";", "s": " ", "\\": "\\", "r": "\r", "n": "\n"}


def justinfan() -> str:
    return f"{ANONYMOUS_PREFIX}{random.randint(1_000, 79_999)}"


def is_justinfan(username: Optional[str]) -> bool:
    return (username or "").startswith(ANONYMOUS_PREFIX)


def channel(value: Optional[str]) -> str:
    normalized = (value or "").strip().lower()
    return normalized if normalized.startswith("#") else f"#{normalized}"


def username(value: Optional[str]) -> str:
    normalized = (value or "").strip().lower()
    return normalized[1:] if normalized.startswith("#") else normalized


def token(value: Optional[str]) -> str:
    if not value:
        return ""
    return TOKEN_REGEX.sub("", value.strip())


def password(value: Optional[str]) -> str:
    tok = token(value)
    return f"oauth:{tok}" if tok else ""


def action_message(message: str) -> Optional[re.Match[str]]:
    return ACTION_MESSAGE_REGEX.match(message)


def username_from_prefix(prefix: Optional[str]) -> str:
    """Return the nick of a ``nick!user@host`` or ``nick@host`` prefix."""
    if not prefix:
        return ""
    if "!" in prefix:
        return prefix.split("!", 1)[0]
    if "@" in prefix:
        return prefix.split("@", 1)[0]
    return ""


def unescape_irc(value: str) -> str:
    """Decode an IRCv3 tag value.

    ``\\:`` becomes ``;``, ``\\s`` a space, ``\\\\`` a backslash, ``\\r`` and
    ``\\n`` CR and LF. A backslash before any other character is dropped and a
    trailing lone backslash is removed.
    """
    if "\\" not in value:
        return value
    out = []
    chars = iter(value)
    for char in chars:
        if char != "\\":
            out.append(char)
            continue
        escaped = next(chars, None)
        if escaped is None:
            break
        out.append(IRC_ESCAPED_CHARS.get(escaped, escaped))
    return "".join(out)


__all__ = [
    "justinfan",
    "is_justinfan",
    "channel",
    "username",
    "token",
    "password",
    "action_message",
    "username_from_prefix",
    "unescape_irc",
]
