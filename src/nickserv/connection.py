"""Per-connection identity record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class Connection(Protocol):
    """Holds the participant's current nickname for one server connection."""

    nickname: str


@dataclass
class IRCConnection:
    """Concrete connection record owned by the host client."""

    server: str
    nickname: str
