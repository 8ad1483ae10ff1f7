from __future__ import annotations

import asyncio
import contextlib
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from .event_emitter import EventEmitter
from .exceptions import (
    ClientRunningError,
    DialError,
    DisconnectCalled,
    LoginFailure,
    MaxReconnects,
    NotConnectedError,
    ParseError,
    PongTimeout,
    ReconnectRequested,
    TransportError,
    TransportReadError,
    TransportWriteError,
)
from .logger import Logger
from .messages import (
    Message,
    MessageType,
    NoticeMessage,
    PongMessage,
    PrivmsgMessage,
    WhisperMessage,
    build_message,
    invalid_line_message,
)
from .options import ClientOptions, ConnectionOptions, IdentityOptions, PingerOptions
from .parser import parse_irc_message
from .rate_limiter import RateLimiter
from .sync import INTENTIONAL_ERRORS, ErrorRecorder, Notifier
from .transport import Dialer, Transport, WebSocketTransport
from . import dispatch, utils

PING_PAYLOAD = "PING :tmi.twitch.tv"
PONG_PAYLOAD = "PONG :tmi.twitch.tv"
CAP_REQ = "CAP REQ :twitch.tv/tags twitch.tv/commands twitch.tv/membership"
PRIVMSG_LIMIT = 500
MAX_BACKOFF_EXPONENT = 30


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    DIALING = "dialing"
    HANDSHAKING = "handshaking"
    CONNECTED = "connected"
    CLOSING = "closing"
    RECONNECTING = "reconnecting"
    TERMINATED = "terminated"


class ClientBase(EventEmitter):
    """Session supervisor for a TMI connection.

    ``connect()`` runs sessions until one ends in a terminal error: each
    session dials the transport, logs in, and then waits for one of the
    fatal, disconnect or reconnect notifiers to fire. Inbound lines are read,
    parsed and handed to the registered handlers on a single reader task, in
    the order they arrive.
    """

    def __init__(self, options: Optional[ClientOptions] = None, *, dialer: Optional[Dialer] = None) -> None:
        super().__init__()
        self.options = options or ClientOptions()
        self.connection: ConnectionOptions = self.options.connection
        self.identity: IdentityOptions = self.options.identity
        self.pinger: PingerOptions = self.options.pinger

        self.log = Logger("tmi_ws", self.options.logging)

        self._dialer: Dialer = dialer or WebSocketTransport.dial
        self._transport: Optional[Transport] = None
        self._running = False
        self.state = ConnectionState.DISCONNECTED

        self.joined_channels: Set[str] = {utils.channel(ch) for ch in self.options.channels if ch.strip(" #")}
        self.reconnect_counter = 0

        self._notify_fatal = Notifier()
        self._notify_disconnect = Notifier()
        self._notify_reconnect = Notifier()
        self._user_disconnect = Notifier()
        self._errors = ErrorRecorder()
        self._pong_received: "asyncio.Queue[PongMessage]" = asyncio.Queue(maxsize=1)
        self._activity = asyncio.Event()
        self._write_lock = asyncio.Lock()

        self._reader_task: Optional[asyncio.Task[None]] = None
        self._pinger_task: Optional[asyncio.Task[None]] = None
        self._joiner_task: Optional[asyncio.Task[None]] = None

        self._join_limiter = RateLimiter(self.connection.join_rate_limit)
        self._channel_limiters: Dict[str, RateLimiter] = {}
        self._global_limiter = RateLimiter(self.connection.global_rate_limit)
        self._whisper_limiter = RateLimiter(self.connection.whisper_rate_limit)

    # --------------------------------------------------------------------- #
    # Connection management
    # --------------------------------------------------------------------- #
    async def connect(self) -> BaseException:
        """Run the client until it terminates and return the reason.

        The returned exception is one of ``DisconnectCalled``, ``LoginFailure``
        or ``MaxReconnects``, or the session error when reconnecting is off.
        """
        if self._running:
            raise ClientRunningError("connect() called while the client is already running.")
        self._running = True
        self._user_disconnect.reset()
        # asyncio primitives bind to the loop they first wait on
        self._write_lock = asyncio.Lock()
        self.reconnect_counter = 0
        try:
            while True:
                error = await self._run_session()
                if self._user_disconnect.is_set() and not isinstance(error, INTENTIONAL_ERRORS):
                    error = DisconnectCalled()
                if self._is_terminal(error):
                    self.log.info("Connection terminated: %s", error)
                    return error

                self.reconnect_counter += 1
                max_attempts = self.connection.max_reconnect_attempts
                if max_attempts >= 0 and self.reconnect_counter > max_attempts:
                    self.log.error("Giving up after %s reconnect attempts", max_attempts)
                    return MaxReconnects(max_attempts)

                delay = self._backoff_delay(self.reconnect_counter - 1)
                self._set_state(ConnectionState.RECONNECTING)
                self.log.warn("Reconnecting in %.2f seconds (attempt %s): %s", delay, self.reconnect_counter, error)
                if await self._sleep_unless_disconnected(delay):
                    self.log.info("Connection terminated: disconnect called while reconnecting")
                    return DisconnectCalled()
        finally:
            self._running = False
            self._set_state(ConnectionState.TERMINATED)

    async def disconnect(self) -> None:
        """Close the connection for good; ``connect()`` returns ``DisconnectCalled``."""
        if not self._running:
            raise NotConnectedError("Cannot disconnect: client is not running.")

        self.log.info("Disconnecting from server..")
        self._errors.update(DisconnectCalled())
        self._user_disconnect.notify()
        self._notify_disconnect.notify()
        if self._transport is not None:
            await self._close_transport(self._transport)

    def _is_terminal(self, error: BaseException) -> bool:
        if isinstance(error, INTENTIONAL_ERRORS) or self._notify_fatal.is_set():
            return True
        return not self.connection.reconnect

    def _backoff_delay(self, attempt: int) -> float:
        maximum = self.connection.max_reconnect_interval
        base = min(self.connection.reconnect_interval, maximum)
        return min(base * 2 ** min(attempt, MAX_BACKOFF_EXPONENT), maximum)

    async def _sleep_unless_disconnected(self, delay: float) -> bool:
        """Sleep for ``delay`` seconds. Returns ``True`` if ``disconnect()`` cut it short."""
        try:
            await asyncio.wait_for(self._user_disconnect.wait(), delay)
        except asyncio.TimeoutError:
            return False
        return True

    async def _run_session(self) -> BaseException:
        self._notify_fatal.reset()
        self._notify_disconnect.reset()
        self._notify_reconnect.reset()
        self._errors.reset()
        # a fresh slot per session so a stale PONG never satisfies the next ping
        self._pong_received = asyncio.Queue(maxsize=1)
        self._activity = asyncio.Event()

        if self._user_disconnect.is_set():
            return DisconnectCalled()

        url = self.connection.url
        self._set_state(ConnectionState.DIALING)
        try:
            transport = await self._dialer(url)
        except DialError as exc:
            self.log.warn("Could not connect to %s: %s", url, exc)
            return exc
        self._transport = transport
        self.log.info("Connected to %s", url)

        self._set_state(ConnectionState.HANDSHAKING)
        self._reader_task = asyncio.create_task(self._read_loop(transport))
        try:
            await self._login()
        except TransportWriteError as exc:
            self.log.warn("Login handshake failed: %s", exc)

        await self._wait_for_shutdown()

        self._set_state(ConnectionState.CLOSING)
        self._transport = None
        await self._close_transport(transport)
        await self._stop_tasks()

        error = self._errors.err
        if error is None:
            error = TransportReadError("session ended without a reason")
        return error

    async def _login(self) -> None:
        if not self.identity.username:
            self.identity.anonymous()
            self.log.info("No username given, connecting anonymously as %s", self.identity.username)

        if self.identity.password:
            await self._write(f"PASS {self.identity.password}", secret=True)
        await self._write(f"NICK {self.identity.username}")
        await self._write(CAP_REQ)

    async def _wait_for_shutdown(self) -> None:
        waiters = [
            asyncio.create_task(self._notify_fatal.wait()),
            asyncio.create_task(self._notify_disconnect.wait()),
            asyncio.create_task(self._notify_reconnect.wait()),
        ]
        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                waiter.cancel()
            await asyncio.gather(*waiters, return_exceptions=True)

    async def _close_transport(self, transport: Transport) -> None:
        try:
            await transport.close()
        except TransportError as exc:
            self.log.debug("Error while closing connection: %s", exc)

    async def _stop_tasks(self) -> None:
        tasks = [task for task in (self._reader_task, self._pinger_task, self._joiner_task) if task is not None]
        self._reader_task = self._pinger_task = self._joiner_task = None
        for task in tasks:
            task.cancel()
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                self.log.error("Session task failed: %r", result)

    def _set_state(self, state: ConnectionState) -> None:
        if state is not self.state:
            self.log.debug("Connection state %s -> %s", self.state.value, state.value)
            self.state = state

    # ------------------------------------------------------------------ #
    # Reader and keepalive
    # ------------------------------------------------------------------ #
    async def _read_loop(self, transport: Transport) -> None:
        while True:
            try:
                frame = await transport.recv()
            except TransportReadError as exc:
                self._errors.update(exc)
                if self.connection.reconnect:
                    self._notify_disconnect.notify()
                else:
                    self._notify_fatal.notify()
                self.log.debug("Reader stopped: %s", exc)
                return

            self._activity.set()
            for line in frame.split("\r\n"):
                if line:
                    await self._handle_line(line)

    async def _handle_line(self, line: str) -> None:
        self.log.trace("< %s", line)
        try:
            data = parse_irc_message(line)
        except ParseError as exc:
            self.log.warn("Could not parse message: %s", exc)
            await self._deliver(invalid_line_message(line, exc))
            return

        message_type = dispatch.lookup(data.prefix, data.command)
        if message_type is MessageType.INVALIDIRC:
            self.log.warn("Unknown command %s from %s", data.command, data.prefix or "server")
        await self._handle_message(build_message(message_type, data))

    async def _handle_message(self, message: Message) -> None:
        message_type = message.type
        if message_type is MessageType.WELCOME:
            self._on_welcome()
        elif isinstance(message, NoticeMessage):
            self._on_notice(message)
        elif message_type is MessageType.RECONNECT:
            self.log.info("Server requested a reconnect")
            self._errors.update(ReconnectRequested())
            self._notify_reconnect.notify()
        elif message_type is MessageType.PING:
            try:
                await self._write(PONG_PAYLOAD)
            except (NotConnectedError, TransportWriteError) as exc:
                self.log.warn("Could not answer PING: %s", exc)
        elif isinstance(message, PongMessage):
            # the pinger only waits for one
            with contextlib.suppress(asyncio.QueueFull):
                self._pong_received.put_nowait(message)
        elif isinstance(message, PrivmsgMessage):
            prefix = "*" if message.action else ""
            self.log.message("[%s] %s<%s>: %s", message.channel, prefix, message.user.name, message.text)
        elif isinstance(message, WhisperMessage):
            self.log.message("[WHISPER] <%s>: %s", message.user.name, message.text)

        await self._deliver(message)

    def _on_welcome(self) -> None:
        self.reconnect_counter = 0
        self._set_state(ConnectionState.CONNECTED)
        self.log.info("Logged in as %s", self.identity.username)

        if self.pinger.enabled and (self._pinger_task is None or self._pinger_task.done()):
            self._pinger_task = asyncio.create_task(self._ping_loop())

        channels = sorted(self.joined_channels)
        if channels and (self._joiner_task is None or self._joiner_task.done()):
            self._joiner_task = asyncio.create_task(self._join_channels(channels))

    def _on_notice(self, message: NoticeMessage) -> None:
        if message.msg_id == "login_failure":
            self.log.error("Login failed: %s", message.text)
            self._errors.update(LoginFailure(message.text or "login authentication failed"))
            self._notify_fatal.notify()

    async def _deliver(self, message: Message) -> None:
        try:
            await self.emit(message)
        except Exception:
            self.log.exception("Error in %s handler", message.type.name)

    async def _join_channels(self, channels: List[str]) -> None:
        for channel in channels:
            if channel not in self.joined_channels:
                continue
            try:
                await self.send(f"JOIN {channel}")
            except (NotConnectedError, TransportWriteError) as exc:
                self.log.warn("Stopped rejoining channels: %s", exc)
                return

    async def _ping_loop(self) -> None:
        interval, timeout = self.pinger.interval, self.pinger.timeout
        while True:
            self._activity.clear()
            try:
                await asyncio.wait_for(self._activity.wait(), interval)
                continue
            except asyncio.TimeoutError:
                pass

            try:
                await self._write(PING_PAYLOAD)
            except (NotConnectedError, TransportWriteError) as exc:
                self.log.debug("Pinger stopped: %s", exc)
                return

            try:
                await asyncio.wait_for(self._pong_received.get(), timeout)
            except asyncio.TimeoutError:
                self.log.warn("No PONG received within %.1f seconds, reconnecting", timeout)
                self._errors.update(PongTimeout(timeout))
                self._notify_reconnect.notify()
                return

    # ------------------------------------------------------------------ #
    # Sending
    # ------------------------------------------------------------------ #
    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    @property
    def is_running(self) -> bool:
        return self._running

    def _channel_limiter(self, channel: str) -> RateLimiter:
        limiter = self._channel_limiters.get(channel)
        if limiter is None:
            limiter = self._channel_limiters[channel] = RateLimiter(self.connection.message_rate_limit)
        return limiter

    def _limiters_for(self, line: str) -> Tuple[RateLimiter, ...]:
        parts = line.split(" ", 2)
        command = parts[0].upper()
        if command in {"JOIN", "PART"}:
            return (self._join_limiter,)
        if command == "PRIVMSG" and len(parts) > 1:
            return (self._channel_limiter(parts[1].lower()), self._global_limiter)
        if command == "WHISPER":
            return (self._whisper_limiter, self._global_limiter)
        return ()

    async def send(self, line: str) -> None:
        """Write a raw IRC line, waiting on the rate limiters of its command first."""
        if self._transport is None:
            raise NotConnectedError("Not connected to server.")
        for limiter in self._limiters_for(line):
            await limiter.wait()
        await self._write(line)

    async def _write(self, line: str, *, secret: bool = False) -> None:
        transport = self._transport
        if transport is None:
            raise NotConnectedError("Socket is not open.")
        async with self._write_lock:
            try:
                await transport.send(line)
            except TransportWriteError as exc:
                self._errors.update(exc)
                self._notify_disconnect.notify()
                raise
        self.log.trace("> %s", "PASS ***" if secret else line)


__all__ = ["ClientBase", "ConnectionState", "PING_PAYLOAD", "PONG_PAYLOAD", "CAP_REQ", "PRIVMSG_LIMIT"]
