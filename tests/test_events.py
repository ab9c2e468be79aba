"""Tests for event types, the handler table and the signal dispatcher."""

from __future__ import annotations

from nickserv.events import (
    Dispatcher,
    EventKind,
    HandlerTable,
    IdentityConfirmed,
    NickChange,
    NicknameInUse,
    Notice,
    Quit,
    RegistrationComplete,
    identity_confirmed,
    nick_change,
    nickname_in_use,
    notice,
    registration_complete,
    user_quit,
)
from tests.mocks import LogCapture, MockConnection, RecordingQueue


class TargetCollector:
    """Event target that collects accepted events."""

    def __init__(self, accept_types: set[type]) -> None:
        self.events: list[tuple[str, object]] = []
        self._accept_types = accept_types

    def accept_event(self, source: str, evt: object) -> bool:
        return type(evt) in self._accept_types

    def push_event(self, source: str, evt: object) -> None:
        self.events.append((source, evt))


def test_event_factories() -> None:
    """Factories return (kind, event) tuples."""
    kind, evt = notice("NickServ", "Phergie", "hello")
    assert kind is EventKind.NOTICE
    assert isinstance(evt, Notice)
    assert evt.nick == "NickServ"
    assert evt.raw == {}

    kind, evt = nick_change("a", "b")
    assert kind is EventKind.NICK
    assert isinstance(evt, NickChange)

    kind, evt = user_quit("a", reason="bye")
    assert kind is EventKind.QUIT
    assert isinstance(evt, Quit)
    assert evt.reason == "bye"

    kind, evt = nickname_in_use("Phergie")
    assert kind is EventKind.NICKNAME_IN_USE
    assert isinstance(evt, NicknameInUse)

    kind, evt = registration_complete("376")
    assert kind is EventKind.REGISTRATION_COMPLETE
    assert isinstance(evt, RegistrationComplete)

    kind, evt = identity_confirmed("Phergie")
    assert kind is EventKind.IDENTITY_CONFIRMED
    assert isinstance(evt, IdentityConfirmed)
    assert evt.connection is None


def test_factory_carries_kind() -> None:
    assert notice.KIND is EventKind.NOTICE
    assert identity_confirmed.KIND.value == "nickserv.identified"


def test_handler_table_routes_to_one_handler() -> None:
    calls: list[tuple[str, object]] = []
    table = HandlerTable(
        {
            EventKind.NOTICE: lambda evt, conn, q: calls.append(("notice", evt)),
            EventKind.QUIT: lambda evt, conn, q: calls.append(("quit", evt)),
        }
    )
    _, evt = notice("NickServ", "Phergie", "hi")

    assert table.route(EventKind.NOTICE, evt, MockConnection(), RecordingQueue()) is True
    assert calls == [("notice", evt)]


def test_handler_table_unknown_kind() -> None:
    table = HandlerTable({})
    _, evt = user_quit("x")

    assert table.route(EventKind.QUIT, evt, MockConnection(), RecordingQueue()) is False
    assert EventKind.QUIT not in table


def test_handler_table_isolates_handler_errors() -> None:
    def boom(evt, conn, q):
        raise RuntimeError("handler failed")

    table = HandlerTable({EventKind.NICK: boom})
    _, evt = nick_change("a", "b")

    assert table.route(EventKind.NICK, evt, MockConnection(), RecordingQueue()) is True


def test_handler_failure_log_omits_locals() -> None:
    def identify(evt, conn, q):
        body = "IDENTIFY Phergie hunter2secret"
        raise ValueError(f"template too long: {len(body)}")

    table = HandlerTable({EventKind.NOTICE: identify})
    _, evt = notice("NickServ", "Phergie", "This nickname is registered.")

    with LogCapture() as logs:
        table.route(EventKind.NOTICE, evt, MockConnection(), RecordingQueue())

    assert "Handler for notice failed" in logs.text
    assert "hunter2secret" not in logs.text


def test_handler_table_is_a_snapshot() -> None:
    handlers = {EventKind.NICK: lambda evt, conn, q: None}
    table = HandlerTable(handlers)
    handlers[EventKind.QUIT] = lambda evt, conn, q: None

    assert table.kinds == {EventKind.NICK}


def test_dispatcher_forwards_to_accepting_targets() -> None:
    dispatcher = Dispatcher()
    collector = TargetCollector({IdentityConfirmed})
    dispatcher.register(collector)

    _, evt = identity_confirmed("Phergie")
    dispatcher.dispatch("nickserv", evt)
    dispatcher.dispatch("nickserv", RegistrationComplete("376"))

    assert collector.events == [("nickserv", evt)]


def test_dispatcher_isolates_target_errors() -> None:
    class FailingTarget:
        def accept_event(self, source, evt):
            return True

        def push_event(self, source, evt):
            raise RuntimeError("push failed")

    dispatcher = Dispatcher()
    working = TargetCollector({IdentityConfirmed})
    dispatcher.register(FailingTarget())
    dispatcher.register(working)

    _, evt = identity_confirmed("Phergie")
    dispatcher.dispatch("nickserv", evt)

    assert len(working.events) == 1


def test_dispatcher_unregister_nonexistent_is_safe() -> None:
    dispatcher = Dispatcher()
    dispatcher.unregister(TargetCollector(set()))


def test_dispatcher_targets_is_a_copy() -> None:
    dispatcher = Dispatcher()
    collector = TargetCollector({IdentityConfirmed})
    dispatcher.register(collector)

    targets = dispatcher.targets
    targets.clear()

    assert dispatcher.targets == [collector]
