"""
Chat command parsing and dispatch.

Messages starting with ``!`` are parsed into one of the command types below;
anything else is ignored. ``CommandHandler`` holds one coroutine per command
type and replies through the callable the transport supplies.
"""
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Union

from ..logging_config import setup_logging
from ..services.llm import MessageParser
from ..services.publishing import PublishPipeline

logger = setup_logging(__name__)

COMMAND_PREFIX = "!"

Reply = Callable[[str], Awaitable[None]]

HELP_TEXT = (
    "🤖 *Blogger Publisher Bot Help*\n\n"
    "Send a message starting with `!publish` followed by job details.\n\n"
    "*Example:* !publish We need a React Dev in Dubai. 3yrs exp. jobs@tech.com"
)
PONG_TEXT = "pong! 🏓 Bot is active."
PROCESSING_TEXT = "🚀 Processing your job post... Please wait."
NOT_UNDERSTOOD_TEXT = (
    "❌ Could not understand the job details. Please ensure you include "
    "the Job Title, Location and Requirements at a minimum."
)


@dataclass(frozen=True)
class PublishCommand:
    text: str


@dataclass(frozen=True)
class HelpCommand:
    pass


@dataclass(frozen=True)
class PingCommand:
    pass


Command = Union[PublishCommand, HelpCommand, PingCommand]
COMMAND_TYPES = (PublishCommand, HelpCommand, PingCommand)


def parse_command(body: str) -> Optional[Command]:
    """Parse a chat message into a command, or None when it should be ignored."""
    text = (body or "").strip()
    if not text.startswith(COMMAND_PREFIX):
        return None

    word, _, rest = text[len(COMMAND_PREFIX):].partition(" ")
    word = word.lower()
    rest = rest.strip()

    if word == "publish":
        return PublishCommand(rest)
    if word == "help" and not rest:
        return HelpCommand()
    if word == "ping" and not rest:
        return PingCommand()
    return None


def format_success(post) -> str:
    return (
        "🎉 Success! Your job post has been drafted.\n\n"
        f"📌 Title: {post.title}\n"
        f"🔗 URL: {post.url}\n"
        f"🆔 ID: {post.id}"
    )


class CommandHandler:
    """Runs chat commands against the message parser and the publish pipeline."""

    def __init__(self, parser: MessageParser, pipeline: PublishPipeline):
        self.parser = parser
        self.pipeline = pipeline
        self.handlers: Dict[type, Callable[[Command, Reply], Awaitable[None]]] = {
            PublishCommand: self._publish,
            HelpCommand: self._help,
            PingCommand: self._ping,
        }

    async def on_message(self, body: str, reply: Reply) -> None:
        command = parse_command(body)
        if command is None:
            return
        logger.info(f"Received command: {type(command).__name__}")
        try:
            await self.handlers[type(command)](command, reply)
        except Exception as e:
            logger.exception("WhatsApp Bot Error")
            await reply(f"❌ Failed to process: {e}")

    async def _publish(self, command: PublishCommand, reply: Reply) -> None:
        logger.info(f"Processing publish command with content: {command.text[:50]}...")
        await reply(PROCESSING_TEXT)

        job = await self.parser.parse(command.text) if command.text else None
        if job is None:
            logger.warning("Failed to extract job details from message")
            await reply(NOT_UNDERSTOOD_TEXT)
            return

        result = await self.pipeline.publish(job, publish=False, labels=[])
        if result.ok:
            logger.info("Successfully drafted post", extra={"post_id": result.post.id})
            await reply(format_success(result.post))
        else:
            await reply(f"❌ Failed to process: {result.error}")

    async def _help(self, command: HelpCommand, reply: Reply) -> None:
        await reply(HELP_TEXT)

    async def _ping(self, command: PingCommand, reply: Reply) -> None:
        await reply(PONG_TEXT)
