"""Twitch Messaging Interface (TMI) client over IRC WebSockets."""

from .client import Client, new_client
from .client_base import ClientBase, ConnectionState
from .exceptions import (
    AnonymousMessageError,
    ClientRunningError,
    DialError,
    DisconnectCalled,
    InvalidChannelError,
    LoginFailure,
    MaxReconnects,
    MessageTooLongError,
    NotConnectedError,
    ParseError,
    PongTimeout,
    ReconnectRequested,
    TMIError,
    TransportError,
    TransportReadError,
    TransportWriteError,
    ValidationError,
)
from .messages import MessageType
from .options import (
    ClientOptions,
    ConnectionOptions,
    IdentityOptions,
    LoggingOptions,
    PingerOptions,
    new_client_config,
)
from .parser import Badge, Emote, IRCData, parse_irc_message
from .rate_limiter import (
    RLIM_GLOBAL_DEFAULT,
    RLIM_JOIN_DEFAULT,
    RLIM_JOIN_VERIFIED,
    RLIM_MSG_DEFAULT,
    RLIM_MSG_MOD,
    RLIM_WHISPER_DEFAULT,
    RateLimit,
    RateLimiter,
)

__all__ = [
    "Client",
    "ClientBase",
    "ConnectionState",
    "new_client",
    "ClientOptions",
    "ConnectionOptions",
    "IdentityOptions",
    "LoggingOptions",
    "PingerOptions",
    "new_client_config",
    "MessageType",
    "IRCData",
    "Badge",
    "Emote",
    "parse_irc_message",
    "RateLimit",
    "RateLimiter",
    "RLIM_JOIN_DEFAULT",
    "RLIM_JOIN_VERIFIED",
    "RLIM_MSG_DEFAULT",
    "RLIM_MSG_MOD",
    "RLIM_GLOBAL_DEFAULT",
    "RLIM_WHISPER_DEFAULT",
    "TMIError",
    "DisconnectCalled",
    "LoginFailure",
    "MaxReconnects",
    "TransportError",
    "DialError",
    "TransportReadError",
    "TransportWriteError",
    "PongTimeout",
    "ReconnectRequested",
    "ParseError",
    "ValidationError",
    "AnonymousMessageError",
    "MessageTooLongError",
    "InvalidChannelError",
    "NotConnectedError",
    "ClientRunningError",
]
