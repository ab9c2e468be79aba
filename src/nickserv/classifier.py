"""Notice classification: agent free text -> intent tag."""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from nickserv.config import NickServConfig


class NoticeIntent(Enum):
    IDENTIFY_REQUEST = "identify_request"
    LOGIN_CONFIRMED = "login_confirmed"
    GHOST_CONFIRMED = "ghost_confirmed"
    UNRECOGNIZED = "unrecognized"


class NoticeClassifier(Protocol):
    """Strategy for recognizing what an agent notice means.

    Services packages phrase their replies differently, so the plugin only
    depends on this interface; swap in another implementation to support a
    different agent without touching the recovery logic.
    """

    def classify(self, text: str, *, ghost_pending: bool = False) -> NoticeIntent: ...


class PatternClassifier:
    """Regex-based classifier.

    Patterns are searched (not anchored) in order: identify request, login
    confirmed, then ghost confirmed. The ghost pattern is only consulted while
    a reclamation is pending. First match wins.
    """

    def __init__(
        self,
        identify_pattern: re.Pattern[str],
        login_pattern: re.Pattern[str],
        ghost_pattern: re.Pattern[str],
    ) -> None:
        self.identify_pattern = identify_pattern
        self.login_pattern = login_pattern
        self.ghost_pattern = ghost_pattern

    @classmethod
    def from_config(cls, config: NickServConfig) -> PatternClassifier:
        return cls(config.identify_pattern, config.login_pattern, config.ghost_pattern)

    def classify(self, text: str, *, ghost_pending: bool = False) -> NoticeIntent:
        if self.identify_pattern.search(text):
            return NoticeIntent.IDENTIFY_REQUEST
        if self.login_pattern.search(text):
            return NoticeIntent.LOGIN_CONFIRMED
        if ghost_pending and self.ghost_pattern.search(text):
            return NoticeIntent.GHOST_CONFIRMED
        return NoticeIntent.UNRECOGNIZED
