"""Tests for the bot lifecycle status."""

from job_publisher.bot.status import BotState, BotStatus


def test_starts_in_starting_state():
    status = BotStatus()
    assert status.state == BotState.STARTING
    assert status.snapshot()["qr_available"] is False


def test_happy_path():
    status = BotStatus()
    assert status.qr_received("qr-1")
    assert status.state == BotState.AWAITING_SCAN
    assert status.qr == "qr-1"
    assert status.qr_time is not None

    assert status.authenticated()
    assert status.qr is None
    assert status.ready()
    assert status.state == BotState.READY


def test_qr_refresh_while_waiting():
    status = BotStatus()
    status.qr_received("qr-1")
    assert status.qr_received("qr-2")
    assert status.qr == "qr-2"


def test_restored_session_skips_qr():
    status = BotStatus()
    assert status.authenticated()
    assert status.ready()


def test_invalid_transition_is_ignored():
    status = BotStatus()
    assert not status.ready()
    assert status.state == BotState.STARTING


def test_failed_is_terminal():
    status = BotStatus()
    status.qr_received("qr")
    assert status.failed("Initialization Error: boom")
    assert status.state == BotState.FAILED
    assert not status.ready()
    assert not status.qr_received("qr-2")
    assert status.snapshot()["error"] == "Initialization Error: boom"


def test_failure_can_be_updated():
    status = BotStatus()
    status.failed("first")
    assert status.failed("second")
    assert status.error == "second"
