"""Tests for reclamation state tracking."""

from nickserv.recovery import IDLE, Idle, PendingReclamation, ReclamationTracker


def test_starts_idle():
    tracker = ReclamationTracker()

    assert tracker.state is IDLE
    assert tracker.pending_nickname is None
    assert tracker.is_pending is False


def test_begin_records_nickname():
    tracker = ReclamationTracker()

    assert tracker.begin("Phergie") is True
    assert tracker.state == PendingReclamation("Phergie")
    assert tracker.pending_nickname == "Phergie"
    assert tracker.is_pending is True


def test_second_begin_ignored():
    tracker = ReclamationTracker()
    tracker.begin("Phergie")

    assert tracker.begin("Phergie_") is False
    assert tracker.pending_nickname == "Phergie"


def test_finish_returns_nickname_once():
    tracker = ReclamationTracker()
    tracker.begin("Phergie")

    assert tracker.finish() == "Phergie"
    assert tracker.state == Idle()
    assert tracker.finish() is None


def test_can_begin_again_after_finish():
    tracker = ReclamationTracker()
    tracker.begin("Phergie")
    tracker.finish()

    assert tracker.begin("Other") is True
    assert tracker.pending_nickname == "Other"
