"""pydle host client: routes IRC callbacks into the NickServ plugin."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any

import pydle
from loguru import logger

from nickserv.commands import NickChange, OutboundQueue, Privmsg
from nickserv.config import NickServConfig
from nickserv.connection import IRCConnection
from nickserv.core.constants import ERR_NOMOTD, RPL_ENDOFMOTD
from nickserv.events import (
    EventKind,
    HandlerTable,
    nick_change,
    nickname_in_use,
    notice,
    registration_complete,
    user_quit,
)
from nickserv.gateway import Bus
from nickserv.plugin import NickServPlugin


class NickServClient(pydle.Client):
    """pydle client carrying one NickServ plugin per connection.

    pydle's fallback nicknames provide the temporary nickname while the
    preferred one is occupied; the plugin takes it from there.
    """

    def __init__(
        self,
        nick: str,
        config: NickServConfig,
        bus: Bus,
        server: str,
        **kwargs: Any,
    ):
        super().__init__(nick, **kwargs)
        self._config = config
        self._bus = bus
        self._server = server
        self._preferred_nick = nick
        self._consumer_task: asyncio.Task | None = None
        self._new_session()

    def _new_session(self) -> None:
        """Fresh connection record, plugin and queue; nothing carries over."""
        self._tracked = IRCConnection(server=self._server, nickname=self._preferred_nick)
        self._plugin = NickServPlugin(self._config, self._bus)
        self._handler_table: HandlerTable = self._plugin.subscribed_events()
        self._outbound = OutboundQueue()

    @property
    def plugin(self) -> NickServPlugin:
        return self._plugin

    @property
    def tracked_connection(self) -> IRCConnection:
        """Nickname record the plugin reads and updates."""
        return self._tracked

    @property
    def outbound(self) -> OutboundQueue:
        return self._outbound

    def _route(self, kind: EventKind, evt: object) -> None:
        self._handler_table.route(kind, evt, self._tracked, self._outbound)

    async def connect(self, *args: Any, **kwargs: Any) -> None:
        """Connect (or reconnect) with a fresh plugin session."""
        await self._stop_consumer()
        self._new_session()
        logger.info("IRC connecting to {} as {}", self._server, self._preferred_nick)
        # pydle disconnects a live connection first, which stops the consumer
        await super().connect(*args, **kwargs)
        self._consumer_task = asyncio.create_task(self._consume_outbound())

    async def on_private_notice(self, target, by, message):
        await super().on_private_notice(target, by, message)
        _, evt = notice(by, target, message)
        self._route(EventKind.NOTICE, evt)

    async def on_nick_change(self, old, new):
        await super().on_nick_change(old, new)
        _, evt = nick_change(old, new)
        self._route(EventKind.NICK, evt)

    async def on_quit(self, user, message=None):
        await super().on_quit(user, message)
        _, evt = user_quit(user, reason=message)
        self._route(EventKind.QUIT, evt)

    async def on_raw_433(self, message):
        """ERR_NICKNAMEINUSE: <client> <nick> :Nickname is already in use."""
        registered = self.registered
        await super().on_raw_433(message)
        params = getattr(message, "params", [])
        # Only collisions during registration start a reclamation
        if registered or len(params) < 2:
            return
        _, evt = nickname_in_use(params[1])
        self._route(EventKind.NICKNAME_IN_USE, evt)

    async def on_raw_376(self, message):
        """RPL_ENDOFMOTD: registration is complete."""
        await super().on_raw_376(message)
        _, evt = registration_complete(RPL_ENDOFMOTD)
        self._route(EventKind.REGISTRATION_COMPLETE, evt)

    async def on_raw_422(self, message):
        """ERR_NOMOTD: registration is complete, server has no MOTD."""
        await super().on_raw_422(message)
        _, evt = registration_complete(ERR_NOMOTD)
        self._route(EventKind.REGISTRATION_COMPLETE, evt)

    async def _consume_outbound(self) -> None:
        """Send queued commands in order."""
        commands = self._outbound
        while True:
            try:
                command = await commands.get()
                try:
                    await self._send(command)
                finally:
                    commands.task_done()
            except asyncio.CancelledError:
                break
            except Exception as exc:
                # No traceback: the command body may carry the credential
                logger.error("IRC send of {} failed: {!r}", type(command).__name__, exc)

    async def _send(self, command: Privmsg | NickChange) -> None:
        if isinstance(command, Privmsg):
            await self.message(command.target, command.text)
        elif isinstance(command, NickChange):
            await self.set_nickname(command.nickname)

    async def _stop_consumer(self) -> None:
        if self._consumer_task:
            self._consumer_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer_task
            self._consumer_task = None

    async def disconnect(self, expected=True):
        """Disconnect and stop the outbound consumer."""
        await self._stop_consumer()
        await super().disconnect(expected)
