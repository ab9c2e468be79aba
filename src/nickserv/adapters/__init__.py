"""Host adapters for running the plugin against a real server."""

from nickserv.adapters.irc import NickServClient

__all__ = ["NickServClient"]
