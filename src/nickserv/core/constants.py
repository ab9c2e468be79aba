"""Protocol constants and configuration defaults."""

from __future__ import annotations

DEFAULT_AGENT_NICK = "NickServ"

# Literal fragments of the agent's phrasing; escaped before compiling.
DEFAULT_IDENTIFY_TEXT = "This nickname is registered"
DEFAULT_LOGIN_TEXT = "You are now identified"
DEFAULT_GHOST_TEXT = "has been ghosted"

DEFAULT_IDENTIFY_COMMAND = "IDENTIFY {nickname} {password}"
GHOST_COMMAND = "GHOST {nickname} {password}"

# Numerics
RPL_ENDOFMOTD = "376"
ERR_NOMOTD = "422"

SIGNAL_SOURCE = "nickserv"
