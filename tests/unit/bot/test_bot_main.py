"""Tests for the WhatsApp bot wiring."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from job_publisher.bot.main import WhatsAppBot, install_exception_handler
from job_publisher.bot.status import BotState, BotStatus
from job_publisher.bot.transport import WhatsAppWebTransport


@pytest.fixture
def status():
    return BotStatus()


@pytest.fixture
def handler():
    mock = MagicMock()
    mock.on_message = AsyncMock()
    return mock


@pytest.fixture
def bot(settings, status, handler):
    return WhatsAppBot(settings, status, handler)


def test_lifecycle_callbacks_update_status(bot, status):
    bot.on_qr("qr-code")
    assert status.state == BotState.AWAITING_SCAN
    bot.on_authenticated()
    bot.on_ready()
    assert status.state == BotState.READY


@pytest.mark.asyncio
async def test_messages_are_handled_in_tasks(bot, handler):
    reply = AsyncMock()
    bot.on_message("!ping", reply)
    assert len(bot.tasks) == 1
    await asyncio.gather(*bot.tasks)
    await asyncio.sleep(0)
    handler.on_message.assert_awaited_once_with("!ping", reply)
    assert not bot.tasks


@pytest.mark.asyncio
async def test_transport_failure_marks_status(bot, status):
    async def crash():
        raise RuntimeError("Chromium not found")

    task = asyncio.create_task(crash())
    await asyncio.gather(task, return_exceptions=True)
    bot.on_transport_done(task)

    assert status.state == BotState.FAILED
    assert status.error == "Initialization Error: Chromium not found"


@pytest.mark.asyncio
async def test_missing_chat_name_fails_startup(bot, status, settings):
    settings.whatsapp_chat_name = ""
    transport = WhatsAppWebTransport(settings, on_message=bot.on_message)

    task = asyncio.create_task(transport.run())
    await asyncio.gather(task, return_exceptions=True)
    bot.on_transport_done(task)

    assert status.state == BotState.FAILED
    assert "WHATSAPP_CHAT_NAME is not set" in status.error


@pytest.mark.asyncio
async def test_cancelled_transport_is_not_a_failure(bot, status):
    task = asyncio.create_task(asyncio.sleep(10))
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    bot.on_transport_done(task)
    assert status.state == BotState.STARTING


@pytest.mark.asyncio
async def test_exception_handler_records_error(status):
    loop = asyncio.get_running_loop()
    original = loop.get_exception_handler()
    try:
        install_exception_handler(loop, status)
        loop.call_exception_handler({"message": "Task exception was never retrieved", "exception": ValueError("bad")})
    finally:
        loop.set_exception_handler(original)

    assert status.state == BotState.FAILED
    assert status.error == "Uncaught Exception:\nValueError: bad"
