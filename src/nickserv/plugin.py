"""NickServ plugin: authenticates the bot and reclaims its nickname from ghosts."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from loguru import logger

from nickserv.classifier import NoticeClassifier, NoticeIntent, PatternClassifier
from nickserv.commands import CommandQueue
from nickserv.config import NickServConfig
from nickserv.connection import Connection
from nickserv.core.constants import GHOST_COMMAND, SIGNAL_SOURCE
from nickserv.events import (
    EventKind,
    HandlerTable,
    NickChange,
    NicknameInUse,
    Notice,
    Quit,
    RegistrationComplete,
    identity_confirmed,
)
from nickserv.gateway import Bus
from nickserv.recovery import ReclamationTracker, RecoveryState


def _same_nick(a: str | None, b: str | None) -> bool:
    return bool(a) and bool(b) and a.casefold() == b.casefold()


_PLACEHOLDER = re.compile(r"\{(nickname|password)\}")


def _fill(template: str, nickname: str, password: str) -> str:
    # Single pass: substituted values are never rescanned for placeholders
    values = {"nickname": nickname, "password": password}
    return _PLACEHOLDER.sub(lambda m: values[m.group(1)], template)


class NickServPlugin:
    """Interacts with the NickServ agent on behalf of one connection.

    Create a new instance per connection; reclamation state is never reset in
    place.
    """

    def __init__(
        self,
        config: NickServConfig | Mapping[str, Any],
        bus: Bus | None = None,
        classifier: NoticeClassifier | None = None,
    ) -> None:
        if not isinstance(config, NickServConfig):
            config = NickServConfig.from_mapping(config)
        self._config = config
        self._bus = bus or Bus()
        self._classifier = classifier or PatternClassifier.from_config(config)
        self._tracker = ReclamationTracker()

    @property
    def config(self) -> NickServConfig:
        return self._config

    @property
    def bus(self) -> Bus:
        return self._bus

    @property
    def state(self) -> RecoveryState:
        return self._tracker.state

    @property
    def pending_ghost_nickname(self) -> str | None:
        return self._tracker.pending_nickname

    def subscribed_events(self) -> HandlerTable:
        """Event kinds this plugin handles, one handler each."""
        return HandlerTable(
            {
                EventKind.NOTICE: self.handle_notice,
                EventKind.NICK: self.handle_nick,
                EventKind.QUIT: self.handle_quit,
                EventKind.NICKNAME_IN_USE: self.handle_nickname_in_use,
                EventKind.REGISTRATION_COMPLETE: self.handle_registration_complete,
            }
        )

    def handle_notice(self, evt: Notice, connection: Connection, queue: CommandQueue) -> None:
        """Respond to identify requests, login confirmations and ghost kills."""
        # Anyone can send a NOTICE; only the agent is trusted
        if not self._config.is_agent(evt.nick):
            return

        intent = self._classifier.classify(evt.text, ghost_pending=self._tracker.is_pending)

        if intent is NoticeIntent.IDENTIFY_REQUEST:
            nickname = connection.nickname
            logger.info("Identifying to {} as {}", self._config.botnick, nickname)
            queue.irc_privmsg(
                self._config.botnick,
                _fill(self._config.identify_command, nickname, self._config.password),
            )
        elif intent is NoticeIntent.LOGIN_CONFIRMED:
            logger.info("Identified to {} as {}", self._config.botnick, connection.nickname)
            _, signal = identity_confirmed(connection.nickname, connection)
            self._bus.publish(SIGNAL_SOURCE, signal)
        elif intent is NoticeIntent.GHOST_CONFIRMED:
            nickname = self._tracker.finish()
            if nickname is not None:
                logger.info("Ghost of {} killed; reclaiming nickname", nickname)
                queue.irc_nick(nickname)

    def handle_nick(self, evt: NickChange, connection: Connection, queue: CommandQueue) -> None:
        """Track server-confirmed renames of our own nickname."""
        if _same_nick(evt.old, connection.nickname):
            logger.debug("Nickname changed: {} -> {}", evt.old, evt.new)
            connection.nickname = evt.new

    def handle_quit(self, evt: Quit, connection: Connection, queue: CommandQueue) -> None:
        """Reclaim our nickname when the user holding it quits."""
        pending = self._tracker.pending_nickname
        if pending is not None:
            if _same_nick(evt.nick, pending):
                self._tracker.finish()
                logger.info("{} quit; reclaiming nickname", pending)
                queue.irc_nick(pending)
            return

        if _same_nick(evt.nick, connection.nickname):
            logger.info("{} quit; reclaiming nickname", connection.nickname)
            queue.irc_nick(connection.nickname)

    def handle_nickname_in_use(
        self,
        evt: NicknameInUse,
        connection: Connection,
        queue: CommandQueue,
    ) -> None:
        """Remember the first occupied nickname so it can be ghosted later."""
        if not self._config.ghost:
            return
        if self._tracker.begin(evt.nickname):
            logger.info("Nickname {} in use; will ghost after registration", evt.nickname)

    def handle_registration_complete(
        self,
        evt: RegistrationComplete,
        connection: Connection,
        queue: CommandQueue,
    ) -> None:
        """Ask the agent to kill the connection holding our nickname."""
        nickname = self._tracker.pending_nickname
        if nickname is None:
            return
        logger.info("Requesting ghost of {} from {}", nickname, self._config.botnick)
        queue.irc_privmsg(
            self._config.botnick,
            _fill(GHOST_COMMAND, nickname, self._config.password),
        )
