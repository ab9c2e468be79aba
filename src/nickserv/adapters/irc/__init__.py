"""IRC adapter package (pydle)."""

from nickserv.adapters.irc.client import NickServClient

__all__ = ["NickServClient"]
