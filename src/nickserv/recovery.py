"""Nickname reclamation state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from loguru import logger


@dataclass(frozen=True)
class Idle:
    """No reclamation in progress."""


@dataclass(frozen=True)
class PendingReclamation:
    """Waiting to ghost and reclaim ``nickname``."""

    nickname: str


RecoveryState = Union[Idle, PendingReclamation]

IDLE = Idle()


class ReclamationTracker:
    """Owns the single piece of sequence state for one connection.

    Only the first occupied nickname is tracked: begin() while pending is a
    no-op, so cascading fallback-nickname collisions cannot re-arm it.
    """

    def __init__(self) -> None:
        self._state: RecoveryState = IDLE

    @property
    def state(self) -> RecoveryState:
        return self._state

    @property
    def pending_nickname(self) -> str | None:
        if isinstance(self._state, PendingReclamation):
            return self._state.nickname
        return None

    @property
    def is_pending(self) -> bool:
        return isinstance(self._state, PendingReclamation)

    def begin(self, nickname: str) -> bool:
        """Idle -> PendingReclamation. Returns False if one is already pending."""
        if self.is_pending:
            return False
        self._state = PendingReclamation(nickname)
        logger.debug("Reclamation pending for {}", nickname)
        return True

    def finish(self) -> str | None:
        """PendingReclamation -> Idle. Returns the nickname to reclaim, if any."""
        nickname = self.pending_nickname
        self._state = IDLE
        if nickname is not None:
            logger.debug("Reclamation of {} complete", nickname)
        return nickname
