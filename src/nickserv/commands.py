"""Outbound command queue: fire-and-forget enqueue, flushed by the host."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Protocol, Union


@dataclass(frozen=True)
class Privmsg:
    """PRIVMSG to a single target. Body may carry a credential, so no repr."""

    target: str
    text: str = field(repr=False)


@dataclass(frozen=True)
class NickChange:
    """NICK request."""

    nickname: str


Command = Union[Privmsg, NickChange]


class CommandQueue(Protocol):
    """Outbound interface consumed by the plugin. Both calls must not block."""

    def irc_privmsg(self, target: str, text: str) -> None: ...

    def irc_nick(self, nickname: str) -> None: ...


class OutboundQueue:
    """CommandQueue backed by an asyncio.Queue; the IRC client consumes it."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Command] = asyncio.Queue()

    def irc_privmsg(self, target: str, text: str) -> None:
        self._queue.put_nowait(Privmsg(target=target, text=text))

    def irc_nick(self, nickname: str) -> None:
        self._queue.put_nowait(NickChange(nickname=nickname))

    async def get(self) -> Command:
        """Wait for the next command."""
        return await self._queue.get()

    def task_done(self) -> None:
        self._queue.task_done()

    async def join(self) -> None:
        """Wait until every queued command has been processed."""
        await self._queue.join()

    def drain(self) -> list[Command]:
        """Remove and return every queued command without waiting."""
        commands: list[Command] = []
        while True:
            try:
                commands.append(self._queue.get_nowait())
            except asyncio.QueueEmpty:
                return commands

    def __len__(self) -> int:
        return self._queue.qsize()
