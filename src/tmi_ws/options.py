from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .rate_limiter import (
    RLIM_GLOBAL_DEFAULT,
    RLIM_JOIN_DEFAULT,
    RLIM_MSG_DEFAULT,
    RLIM_WHISPER_DEFAULT,
    RateLimit,
)
from . import utils

TWITCH_WSS_URL = "wss://irc-ws.chat.twitch.tv:443"
TWITCH_WS_URL = "ws://irc-ws.chat.twitch.tv:80"
MIN_RECONNECT_INTERVAL = 5.0
ANONYMOUS_PASSWORD = "swordfish"


@dataclass(slots=True)
class ConnectionOptions:
    """Connection related configuration. Intervals are in seconds."""

    secure: bool = True
    reconnect: bool = True
    reconnect_interval: float = 1.0
    max_reconnect_interval: float = 30.0
    max_reconnect_attempts: int = -1  # negative retries forever
    join_rate_limit: RateLimit = RLIM_JOIN_DEFAULT
    message_rate_limit: RateLimit = RLIM_MSG_DEFAULT
    global_rate_limit: RateLimit = RLIM_GLOBAL_DEFAULT
    whisper_rate_limit: RateLimit = RLIM_WHISPER_DEFAULT

    def __post_init__(self) -> None:
        self.max_reconnect_interval = max(float(self.max_reconnect_interval), MIN_RECONNECT_INTERVAL)

    @property
    def url(self) -> str:
        return TWITCH_WSS_URL if self.secure else TWITCH_WS_URL

    def set_secure(self, secure: bool) -> "ConnectionOptions":
        self.secure = secure
        return self

    def set_reconnect(self, reconnect: bool) -> "ConnectionOptions":
        self.reconnect = reconnect
        return self

    def set_reconnect_settings(self, max_attempts: int, max_interval: float) -> "ConnectionOptions":
        self.max_reconnect_attempts = max_attempts
        self.max_reconnect_interval = max(float(max_interval), MIN_RECONNECT_INTERVAL)
        return self


@dataclass(slots=True)
class IdentityOptions:
    """Authentication options."""

    username: str = ""
    password: str = ""

    def set(self, username: str, password: str) -> "IdentityOptions":
        self.set_username(username)
        self.set_password(password)
        return self

    def set_username(self, username: str) -> "IdentityOptions":
        self.username = utils.username(username)
        return self

    def set_password(self, password: str) -> "IdentityOptions":
        self.password = utils.password(password)
        return self

    def anonymous(self) -> "IdentityOptions":
        self.username = utils.justinfan()
        self.password = ANONYMOUS_PASSWORD
        return self

    @property
    def is_anonymous(self) -> bool:
        return not self.username or utils.is_justinfan(self.username)


@dataclass(slots=True)
class PingerOptions:
    """Keepalive configuration: ``interval`` of silence before a PING, ``timeout`` to get the PONG."""

    enabled: bool = True
    interval: float = 60.0
    timeout: float = 5.0

    def set(self, wait: float, timeout: float) -> "PingerOptions":
        if wait <= 0 or timeout <= 0:
            raise ValueError("Pinger wait and timeout must be positive")
        self.interval = float(wait)
        self.timeout = float(timeout)
        return self

    def enable(self) -> "PingerOptions":
        self.enabled = True
        return self

    def disable(self) -> "PingerOptions":
        self.enabled = False
        return self


@dataclass(slots=True)
class LoggingOptions:
    """Logger configuration."""

    level: str = "error"
    messages_level: str = "info"


@dataclass(slots=True)
class ClientOptions:
    """Top-level client configuration."""

    channels: List[str] = field(default_factory=list)
    connection: ConnectionOptions = field(default_factory=ConnectionOptions)
    identity: IdentityOptions = field(default_factory=IdentityOptions)
    pinger: PingerOptions = field(default_factory=PingerOptions)
    logging: LoggingOptions = field(default_factory=LoggingOptions)


def new_client_config(username: Optional[str] = None, password: Optional[str] = None) -> ClientOptions:
    options = ClientOptions()
    if username:
        options.identity.set(username, password or "")
    return options


__all__ = [
    "ClientOptions",
    "ConnectionOptions",
    "IdentityOptions",
    "PingerOptions",
    "LoggingOptions",
    "new_client_config",
    "TWITCH_WSS_URL",
    "TWITCH_WS_URL",
]
