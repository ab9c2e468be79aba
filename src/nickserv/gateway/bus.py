"""Signal bus: informational events from the plugin to other observers."""

from nickserv.events import Dispatcher, EventTarget

__all__ = ["Bus", "EventTarget"]


class Bus:
    """Wraps the broadcast dispatcher. Observers register and receive signals."""

    def __init__(self) -> None:
        self._dispatcher = Dispatcher()

    def register(self, target: EventTarget) -> None:
        self._dispatcher.register(target)

    def unregister(self, target: EventTarget) -> None:
        self._dispatcher.unregister(target)

    @property
    def targets(self) -> list[EventTarget]:
        """Registered observers, in registration order."""
        return self._dispatcher.targets

    def publish(self, source: str, evt: object) -> None:
        """Publish event to all targets that accept it."""
        self._dispatcher.dispatch(source, evt)
