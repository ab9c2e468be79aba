"""Gateway: signal bus for observers of the plugin."""

from nickserv.gateway.bus import Bus

__all__ = ["Bus"]
