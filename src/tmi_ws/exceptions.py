"""Custom exceptions for the tmi_ws package."""

from __future__ import annotations


class TMIError(Exception):
    """Base exception for the package."""


class DisconnectCalled(TMIError):
    """The user called ``disconnect()``. Terminal, never retried."""

    def __init__(self, message: str = "disconnect called") -> None:
        super().__init__(message)


class LoginFailure(TMIError):
    """Twitch rejected the login credentials. Terminal."""

    def __init__(self, message: str = "login authentication failed") -> None:
        super().__init__(message)


class MaxReconnects(TMIError):
    """The configured number of reconnect attempts was exhausted. Terminal."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"max reconnect attempts reached ({attempts})")
        self.attempts = attempts


class TransportError(TMIError):
    """Base class for failures of the underlying WebSocket transport."""


class DialError(TransportError):
    """Raised when the transport could not be established."""


class TransportReadError(TransportError):
    """Raised when reading from the transport fails or the peer closed it."""


class TransportWriteError(TransportError):
    """Raised when writing to the transport fails."""


class PongTimeout(TMIError):
    """The server did not answer a keepalive PING in time."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"no PONG received within {timeout:g}s")
        self.timeout = timeout


class ReconnectRequested(TMIError):
    """The server asked the client to reconnect."""

    def __init__(self, message: str = "server requested reconnect") -> None:
        super().__init__(message)


class ParseError(TMIError):
    """Raised when a line cannot be parsed as an IRC message."""

    def __init__(self, reason: str, line: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.reason = reason
        self.line = line


class ValidationError(TMIError):
    """Raised synchronously when an outbound command is refused."""


class AnonymousMessageError(ValidationError):
    """Raised when attempting to whisper or send a message anonymously."""


class MessageTooLongError(ValidationError):
    """Raised when a chat message reaches Twitch's length limit."""


class InvalidChannelError(ValidationError):
    """Raised when a channel name is empty."""


class NotConnectedError(TMIError):
    """Raised when attempting to send while no transport is open."""


class ClientRunningError(TMIError):
    """Raised when ``connect()`` is called on a client that is already running."""
