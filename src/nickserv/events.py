"""Event types, handler table and signal dispatcher."""

from __future__ import annotations

import functools
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

from loguru import logger

if TYPE_CHECKING:
    from nickserv.commands import CommandQueue
    from nickserv.connection import Connection


class EventKind(str, Enum):
    """Discrete protocol event kinds the plugin can subscribe to."""

    NOTICE = "notice"
    NICK = "nick"
    QUIT = "quit"
    NICKNAME_IN_USE = "nickname_in_use"
    REGISTRATION_COMPLETE = "registration_complete"
    IDENTITY_CONFIRMED = "nickserv.identified"


@dataclass
class Notice:
    """Private NOTICE addressed to the participant."""

    nick: str  # sender
    target: str
    text: str
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class NickChange:
    """Server-confirmed NICK."""

    old: str
    new: str
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class Quit:
    """User disconnected."""

    nick: str
    reason: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class NicknameInUse:
    """ERR_NICKNAMEINUSE for the nickname we asked for."""

    nickname: str
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class RegistrationComplete:
    """End of connection registration (end of MOTD, or no MOTD)."""

    numeric: str


@dataclass
class IdentityConfirmed:
    """Signal: the agent accepted our identification."""

    nickname: str
    connection: Connection | None = None


def event(kind: EventKind):
    """Decorator to mark a factory as producing an event of the given kind."""

    def decorator(f: Any) -> Any:
        @functools.wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> tuple[EventKind, object]:
            evt = f(*args, **kwargs)
            return (kind, evt)

        wrapper.KIND = kind
        return wrapper

    return decorator


@event(EventKind.NOTICE)
def notice(nick: str, target: str, text: str, *, raw: dict[str, Any] | None = None) -> Notice:
    return Notice(nick=nick, target=target, text=text, raw=raw or {})


@event(EventKind.NICK)
def nick_change(old: str, new: str, *, raw: dict[str, Any] | None = None) -> NickChange:
    return NickChange(old=old, new=new, raw=raw or {})


@event(EventKind.QUIT)
def user_quit(nick: str, *, reason: str | None = None, raw: dict[str, Any] | None = None) -> Quit:
    return Quit(nick=nick, reason=reason, raw=raw or {})


@event(EventKind.NICKNAME_IN_USE)
def nickname_in_use(nickname: str, *, raw: dict[str, Any] | None = None) -> NicknameInUse:
    return NicknameInUse(nickname=nickname, raw=raw or {})


@event(EventKind.REGISTRATION_COMPLETE)
def registration_complete(numeric: str) -> RegistrationComplete:
    return RegistrationComplete(numeric=numeric)


@event(EventKind.IDENTITY_CONFIRMED)
def identity_confirmed(nickname: str, connection: Connection | None = None) -> IdentityConfirmed:
    return IdentityConfirmed(nickname=nickname, connection=connection)


Handler = Callable[[Any, "Connection", "CommandQueue"], None]


class HandlerTable:
    """Maps each EventKind to exactly one handler. Built once, then read-only."""

    def __init__(self, handlers: Mapping[EventKind, Handler]) -> None:
        self._handlers: dict[EventKind, Handler] = dict(handlers)

    def __contains__(self, kind: object) -> bool:
        return kind in self._handlers

    @property
    def kinds(self) -> frozenset[EventKind]:
        return frozenset(self._handlers)

    def route(
        self,
        kind: EventKind,
        evt: object,
        connection: Connection,
        queue: CommandQueue,
    ) -> bool:
        """Invoke the handler for kind. Returns False when nothing is subscribed."""
        handler = self._handlers.get(kind)
        if handler is None:
            return False
        try:
            handler(evt, connection, queue)
        except Exception as exc:
            # No traceback: handler locals may hold the credential
            logger.error("Handler for {} failed: {!r}", kind.value, exc)
        return True


class EventTarget(Protocol):
    """Signal observer: accept_event + push_event."""

    def accept_event(self, source: str, evt: object) -> bool:
        """Return True if this target wants the event."""
        ...

    def push_event(self, source: str, evt: object) -> None:
        """Handle the event."""
        ...


class Dispatcher:
    """Broadcast dispatcher; targets filter by type and receive events."""

    def __init__(self) -> None:
        self._targets: list[EventTarget] = []

    @property
    def targets(self) -> list[EventTarget]:
        """Registered targets, in registration order."""
        return list(self._targets)

    def register(self, target: EventTarget) -> None:
        self._targets.append(target)

    def unregister(self, target: EventTarget) -> None:
        if target in self._targets:
            self._targets.remove(target)

    def dispatch(self, source: str, evt: object) -> None:
        """Dispatch event to all targets that accept it."""
        for target in self._targets:
            try:
                if target.accept_event(source, evt):
                    target.push_event(source, evt)
            except Exception as exc:
                logger.exception("Failed to pass event to target {}: {}", target, exc)
