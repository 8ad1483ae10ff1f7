from __future__ import annotations

from typing import List, Optional

from .client_base import PRIVMSG_LIMIT, ClientBase
from .event_emitter import Handler
from .exceptions import AnonymousMessageError, InvalidChannelError, MessageTooLongError, ValidationError
from .messages import MessageType
from .options import ClientOptions
from .transport import Dialer
from . import utils


class Client(ClientBase):
    """Twitch chat client: channel membership, chat commands and handler registration."""

    # ------------------------------------------------------------------ #
    # Chat commands
    # ------------------------------------------------------------------ #
    async def join(self, *channels: str) -> List[str]:
        """Join ``channels`` now if connected, and on every later reconnect."""
        names = [self._channel_name(channel) for channel in channels]
        self.joined_channels.update(names)
        if self.is_connected:
            for name in names:
                await self.send(f"JOIN {name}")
        return names

    async def part(self, *channels: str) -> List[str]:
        names = [self._channel_name(channel) for channel in channels]
        self.joined_channels.difference_update(names)
        if self.is_connected:
            for name in names:
                await self.send(f"PART {name}")
        return names

    async def say(self, channel: str, message: str) -> None:
        if self.identity.is_anonymous:
            raise AnonymousMessageError("Cannot send anonymous messages.")
        if len(message.encode("utf-8")) >= PRIVMSG_LIMIT:
            raise MessageTooLongError(f"Message must be shorter than {PRIVMSG_LIMIT} bytes.")
        await self.send(f"PRIVMSG {self._channel_name(channel)} :{message}")

    async def action(self, channel: str, message: str) -> None:
        await self.say(channel, f"\u0001ACTION {message}\u0001")

    async def whisper(self, username: str, message: str) -> None:
        if self.identity.is_anonymous:
            raise AnonymousMessageError("Cannot send anonymous whispers.")
        target = utils.username(username)
        if not target:
            raise ValidationError("Whisper target must not be empty.")
        await self.send(f"WHISPER {target} :{message}")

    def update_password(self, password: str) -> None:
        """Replace the OAuth token used on the next login."""
        self.identity.set_password(password)

    @staticmethod
    def _channel_name(channel: str) -> str:
        name = utils.channel(channel)
        if name == "#":
            raise InvalidChannelError(f"Invalid channel name {channel!r}.")
        return name

    # ------------------------------------------------------------------ #
    # Handler registration
    # ------------------------------------------------------------------ #
    def on_connected(self, handler: Handler) -> "Client":
        return self.on(MessageType.WELCOME, handler)

    def on_unset_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.UNSET, handler)

    def on_invalid_irc_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.INVALIDIRC, handler)

    def on_clear_chat_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.CLEARCHAT, handler)

    def on_clear_msg_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.CLEARMSG, handler)

    def on_global_userstate_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.GLOBALUSERSTATE, handler)

    def on_host_target_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.HOSTTARGET, handler)

    def on_notice_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.NOTICE, handler)

    def on_reconnect_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.RECONNECT, handler)

    def on_roomstate_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.ROOMSTATE, handler)

    def on_usernotice_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.USERNOTICE, handler)

    def on_userstate_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.USERSTATE, handler)

    def on_mode_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.MODE, handler)

    def on_names_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.NAMES, handler)

    def on_join_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.JOIN, handler)

    def on_part_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.PART, handler)

    def on_ping_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.PING, handler)

    def on_pong_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.PONG, handler)

    def on_privmsg_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.PRIVMSG, handler)

    def on_whisper_message(self, handler: Handler) -> "Client":
        return self.on(MessageType.WHISPER, handler)


def new_client(options: Optional[ClientOptions] = None, *, dialer: Optional[Dialer] = None) -> Client:
    return Client(options, dialer=dialer)


__all__ = ["Client", "new_client"]
