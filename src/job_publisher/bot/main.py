#!/usr/bin/env python3
"""
WhatsApp Publisher Bot

Listens for ``!publish`` commands in a WhatsApp chat, drafts the job post on
Blogger and serves a status page with the login QR code.
"""

import asyncio
from typing import Any, Dict, Optional, Set

import uvicorn
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from dotenv import load_dotenv

from ..config import Settings, get_settings
from ..logging_config import get_metrics_logger, setup_logging
from ..services.publishing.factory import build_message_parser, build_pipeline
from .commands import CommandHandler, Reply
from .status import BotStatus
from .transport import WhatsAppWebTransport
from .web import create_status_app

logger = setup_logging("whatsapp_bot")
metrics_logger = get_metrics_logger("whatsapp_bot")


class WhatsAppBot:
    """Connects transport events to the status record and the command handler."""

    def __init__(self, settings: Settings, status: BotStatus, handler: CommandHandler):
        self.settings = settings
        self.status = status
        self.handler = handler
        self.tasks: Set[asyncio.Task] = set()

    def on_qr(self, qr: str) -> None:
        self.status.qr_received(qr)
        logger.info("=" * 40)
        logger.info("WHATSAPP QR CODE RECEIVED")
        logger.info(f"VIEW SCANNABLE QR HERE: http://localhost:{self.settings.port}/qr")
        logger.info("=" * 40)

    def on_authenticated(self) -> None:
        logger.info("Authenticated successfully!")
        self.status.authenticated()

    def on_ready(self) -> None:
        logger.info("WhatsApp Bot is ready and listening!")
        self.status.ready()

    def on_message(self, body: str, reply: Reply) -> None:
        """Handle each message in its own task so a slow pipeline never blocks polling."""
        task = asyncio.create_task(self.handler.on_message(body, reply))
        self.tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self.tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Message task failed", exc_info=task.exception())

    def on_transport_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("FATAL ERROR DURING INITIALIZATION", exc_info=error)
            self.status.failed(f"Initialization Error: {error}")


def install_exception_handler(loop: asyncio.AbstractEventLoop, status: BotStatus) -> None:
    """Record unhandled loop errors on the status page instead of crashing."""

    def handler(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        error: Optional[BaseException] = context.get("exception")
        logger.error(f"UNCAUGHT EXCEPTION: {context.get('message')}", exc_info=error)
        detail = f"{type(error).__name__}: {error}" if error else context.get("message", "unknown error")
        status.failed(f"Uncaught Exception:\n{detail}")

    loop.set_exception_handler(handler)


async def run_bot(settings: Settings) -> None:
    status = BotStatus()
    install_exception_handler(asyncio.get_running_loop(), status)

    handler = CommandHandler(build_message_parser(settings), build_pipeline(settings))
    bot = WhatsAppBot(settings, status, handler)

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        metrics_logger.log_process_metrics,
        trigger="interval",
        seconds=settings.memory_log_interval_seconds,
        id="memory_usage",
    )
    scheduler.start()

    app = create_status_app(status, metrics_logger)
    server = uvicorn.Server(uvicorn.Config(app, host="0.0.0.0", port=settings.port, log_level="info"))
    logger.info(f"Health check server listening on port {settings.port}")

    transport = WhatsAppWebTransport(
        settings,
        on_message=bot.on_message,
        on_qr=bot.on_qr,
        on_authenticated=bot.on_authenticated,
        on_ready=bot.on_ready,
    )
    logger.info("Initializing WhatsApp client...")
    transport_task = asyncio.create_task(transport.run())
    transport_task.add_done_callback(bot.on_transport_done)

    try:
        # The status server keeps running after a transport failure so the error stays visible
        await server.serve()
    finally:
        transport_task.cancel()
        await asyncio.gather(transport_task, return_exceptions=True)
        scheduler.shutdown()
        logger.info("Bot shutdown complete")


def main() -> None:
    load_dotenv()
    asyncio.run(run_bot(get_settings()))


if __name__ == "__main__":
    main()
