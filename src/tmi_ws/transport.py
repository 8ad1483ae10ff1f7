"""WebSocket transport the client reads IRC frames from and writes lines to."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Protocol

import websockets
from websockets.asyncio.client import ClientConnection

from .exceptions import DialError, TransportError, TransportReadError, TransportWriteError

NORMAL_CLOSURE = 1000
DIAL_TIMEOUT = 10.0


class Transport(Protocol):
    async def recv(self) -> str: ...

    async def send(self, line: str) -> None: ...

    async def close(self) -> None: ...


Dialer = Callable[[str], Awaitable[Transport]]


class WebSocketTransport:
    """Framed text transport over a ``websockets`` client connection.

    Library level keepalive pings are disabled; liveness is checked with IRC
    PING/PONG by the client instead.
    """

    def __init__(self, ws: ClientConnection, url: str) -> None:
        self.ws = ws
        self.url = url

    @classmethod
    async def dial(cls, url: str, *, timeout: Optional[float] = DIAL_TIMEOUT) -> "WebSocketTransport":
        try:
            ws = await websockets.connect(url, ping_interval=None, open_timeout=timeout)
        except (OSError, asyncio.TimeoutError, websockets.WebSocketException) as exc:
            raise DialError(f"Failed to connect to {url}: {exc}") from exc
        return cls(ws, url)

    async def recv(self) -> str:
        try:
            frame = await self.ws.recv()
        except websockets.ConnectionClosed as exc:
            raise TransportReadError(f"Connection closed: {exc}") from exc
        except OSError as exc:
            raise TransportReadError(str(exc)) from exc
        if isinstance(frame, bytes):
            return frame.decode("utf-8", errors="replace")
        return frame

    async def send(self, line: str) -> None:
        try:
            await self.ws.send(line)
        except websockets.ConnectionClosed as exc:
            raise TransportWriteError(f"Connection closed: {exc}") from exc
        except OSError as exc:
            raise TransportWriteError(str(exc)) from exc

    async def close(self) -> None:
        try:
            await self.ws.close(code=NORMAL_CLOSURE)
        except (OSError, websockets.WebSocketException) as exc:
            raise TransportError(f"Close failed: {exc}") from exc


__all__ = ["Transport", "Dialer", "WebSocketTransport", "NORMAL_CLOSURE"]
