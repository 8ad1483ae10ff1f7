from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, Iterable, Optional, TypeVar

from .messages import Message, MessageType

Handler = Callable[[Any], Any]
E = TypeVar("E", bound="EventEmitter")


class EventEmitter:
    """Holds at most one handler per message type and delivers messages to it.

    Registering a handler for a type replaces the previous one. Handlers may
    be plain callables or coroutine functions; awaitable results are awaited
    in place so delivery stays in receive order.
    """

    def __init__(self) -> None:
        self._handlers: Dict[MessageType, Handler] = {}

    def on(self: E, message_type: MessageType, handler: Handler) -> E:
        if not callable(handler):
            raise TypeError(f"Handler for {message_type.name} is not callable")
        self._handlers[MessageType(message_type)] = handler
        return self

    def off(self: E, message_type: MessageType) -> E:
        self._handlers.pop(MessageType(message_type), None)
        return self

    def remove_all_handlers(self: E) -> E:
        self._handlers.clear()
        return self

    def handler(self, message_type: MessageType) -> Optional[Handler]:
        return self._handlers.get(MessageType(message_type))

    def handled_types(self) -> Iterable[MessageType]:
        return tuple(self._handlers)

    async def emit(self, message: Message) -> bool:
        """Deliver ``message`` to the handler of its type. Returns ``False`` when none is set."""
        handler = self._handlers.get(message.type)
        if handler is None:
            return False
        result = handler(message)
        if inspect.isawaitable(result):
            await result
        return True


__all__ = ["EventEmitter", "Handler"]
