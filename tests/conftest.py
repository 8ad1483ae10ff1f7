import asyncio
import time
from typing import Callable, List, Optional, Set

import pytest

from tmi_ws.exceptions import DialError, TransportReadError, TransportWriteError
from tmi_ws.options import ClientOptions, new_client_config

_CLOSED = object()


class FakeTransport:
    """In-memory transport; lines written to it are answered by its ``FakeServer``."""

    def __init__(self, server: "FakeServer") -> None:
        self.server = server
        self.inbox: asyncio.Queue = asyncio.Queue()
        self.sent: List[str] = []
        self.nick = ""
        self.closed = False
        self.fail_writes = False

    async def recv(self) -> str:
        item = await self.inbox.get()
        if item is _CLOSED:
            # keep later readers failing too
            self.inbox.put_nowait(_CLOSED)
            raise TransportReadError("connection closed")
        return item

    async def send(self, line: str) -> None:
        if self.closed or self.fail_writes:
            raise TransportWriteError("connection closed")
        self.sent.append(line)
        self.server.respond(self, line)

    async def close(self) -> None:
        self.drop()

    def feed(self, *lines: str) -> None:
        self.inbox.put_nowait("".join(f"{line}\r\n" for line in lines))

    def drop(self) -> None:
        if not self.closed:
            self.closed = True
            self.inbox.put_nowait(_CLOSED)


class FakeServer:
    """Dialer emulating the parts of TMI the client talks to."""

    def __init__(self) -> None:
        self.transports: List[FakeTransport] = []
        self.urls: List[str] = []
        self.fail_dials = 0
        self.rejected_users: Set[str] = set()
        self.answer_pings = True

    @property
    def dial_count(self) -> int:
        return len(self.urls)

    @property
    def last(self) -> FakeTransport:
        return self.transports[-1]

    async def __call__(self, url: str) -> FakeTransport:
        self.urls.append(url)
        if self.dial_count <= self.fail_dials:
            raise DialError(f"connection refused: {url}")
        transport = FakeTransport(self)
        self.transports.append(transport)
        return transport

    def respond(self, transport: FakeTransport, line: str) -> None:
        command, _, rest = line.partition(" ")
        if command == "NICK":
            transport.nick = rest
            if rest in self.rejected_users:
                transport.feed(":tmi.twitch.tv NOTICE * :Login authentication failed")
                return
            transport.feed(
                f":tmi.twitch.tv 001 {rest} :Welcome, GLHF!",
                f":tmi.twitch.tv 002 {rest} :Your host is tmi.twitch.tv",
                f":tmi.twitch.tv 376 {rest} :>",
            )
        elif command == "CAP" and transport.nick in self.rejected_users:
            transport.drop()
        elif command in {"JOIN", "PART"}:
            nick = transport.nick
            transport.feed(f":{nick}!{nick}@{nick}.tmi.twitch.tv {command} {rest}")
        elif command == "PING" and self.answer_pings:
            transport.feed(":tmi.twitch.tv PONG tmi.twitch.tv :tmi.twitch.tv")


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def options() -> ClientOptions:
    config = new_client_config()
    config.connection.reconnect_interval = 0.01
    config.connection.max_reconnect_interval = 0.05
    return config


@pytest.fixture
def wait_until() -> Callable:
    async def waiter(predicate: Callable[[], bool], timeout: Optional[float] = 2.0) -> None:
        deadline = time.monotonic() + timeout
        while not predicate():
            if time.monotonic() > deadline:
                raise AssertionError("condition not met in time")
            await asyncio.sleep(0.005)

    return waiter
