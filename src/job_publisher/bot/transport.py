"""
WhatsApp Web transport driven by a persistent Playwright Chromium profile.

The transport logs in (emitting QR codes until the session is linked), opens
the configured chat and polls it for new messages. Each new message is handed
to ``on_message`` together with a coroutine that replies in the same chat.
"""
import asyncio
from collections import OrderedDict
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from playwright.async_api import Page, async_playwright

from ..config import Settings
from ..errors import ConfigurationError
from ..logging_config import setup_logging

logger = setup_logging(__name__)

WHATSAPP_URL = "https://web.whatsapp.com"

CHAT_LIST_SELECTOR = "div[aria-label='Chat list'], #pane-side"
QR_SELECTOR = "div[data-ref]"
SEARCH_SELECTORS = [
    "div[role='textbox'][aria-label='Search input textbox']",
    "div[contenteditable='true'][data-tab='3']",
]
COMPOSE_SELECTOR = "footer div[contenteditable='true']"

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--disable-gpu",
    "--hide-scrollbars",
    "--disable-notifications",
    "--disable-extensions",
]

# Returns [{id, text}] for every message currently rendered in the open chat.
MESSAGES_SCRIPT = """
() => Array.from(document.querySelectorAll('#main div[data-id]')).map(el => {
    const span = el.querySelector('span.selectable-text');
    return {id: el.getAttribute('data-id'), text: span ? span.innerText : ''};
})
"""

Reply = Callable[[str], Awaitable[None]]

MAX_TRACKED_IDS = 1000


class MessageTracker:
    """Remembers which message ids were already seen in the open chat.

    The first snapshot only primes the tracker so chat history is never replayed.
    Only the ``max_ids`` most recently rendered ids are kept.
    """

    def __init__(self, max_ids: int = MAX_TRACKED_IDS):
        self.max_ids = max_ids
        self.seen: "OrderedDict[str, None]" = OrderedDict()
        self.primed = False

    def new_messages(self, snapshot: Iterable[Dict[str, str]]) -> List[Dict[str, str]]:
        fresh = []
        for message in snapshot:
            message_id = message.get("id")
            if not message_id:
                continue
            if message_id in self.seen:
                # Still rendered, keep it among the most recent ids
                self.seen.move_to_end(message_id)
                continue
            self.seen[message_id] = None
            while len(self.seen) > self.max_ids:
                self.seen.popitem(last=False)
            if self.primed and message.get("text"):
                fresh.append(message)
        self.primed = True
        return fresh


class WhatsAppWebTransport:
    """Logs into WhatsApp Web and relays messages of one chat."""

    def __init__(
        self,
        settings: Settings,
        on_message: Callable[[str, Reply], None],
        on_qr: Optional[Callable[[str], None]] = None,
        on_authenticated: Optional[Callable[[], None]] = None,
        on_ready: Optional[Callable[[], None]] = None,
    ):
        self.settings = settings
        self.on_message = on_message
        self.on_qr = on_qr or (lambda qr: None)
        self.on_authenticated = on_authenticated or (lambda: None)
        self.on_ready = on_ready or (lambda: None)
        self.tracker = MessageTracker()
        self._page_lock = asyncio.Lock()

    async def run(self) -> None:
        """Launch the browser and relay messages until cancelled."""
        chat_name = self.settings.whatsapp_chat_name.strip()
        if not chat_name:
            raise ConfigurationError("WHATSAPP_CHAT_NAME is not set; the bot needs the name of the chat to watch")

        async with async_playwright() as playwright:
            logger.info("Launching Chromium persistent context", extra={"session_dir": self.settings.whatsapp_session_dir})
            context = await playwright.chromium.launch_persistent_context(
                user_data_dir=self.settings.whatsapp_session_dir,
                headless=self.settings.headless,
                executable_path=self.settings.chromium_path or None,
                args=CHROMIUM_ARGS,
            )
            try:
                page = context.pages[0] if context.pages else await context.new_page()
                await page.goto(WHATSAPP_URL, wait_until="domcontentloaded")
                await self._wait_for_login(page)
                await self._open_chat(page, chat_name)
                self.on_ready()
                await self._listen(page)
            finally:
                await context.close()

    async def _wait_for_login(self, page: Page) -> None:
        last_qr = None
        while True:
            if await page.query_selector(CHAT_LIST_SELECTOR):
                logger.info("WhatsApp session is active")
                self.on_authenticated()
                return
            qr_element = await page.query_selector(QR_SELECTOR)
            if qr_element:
                qr = await qr_element.get_attribute("data-ref")
                if qr and qr != last_qr:
                    last_qr = qr
                    self.on_qr(qr)
            await asyncio.sleep(1)

    async def _open_chat(self, page: Page, chat_name: str) -> None:
        logger.info(f"Opening WhatsApp chat '{chat_name}'")
        for selector in SEARCH_SELECTORS:
            search_input = page.locator(selector).first
            if await search_input.count() > 0:
                break
        else:
            raise RuntimeError("Could not find WhatsApp search input.")
        await search_input.click()
        await search_input.fill("")
        await search_input.press_sequentially(chat_name, delay=50)
        await page.keyboard.press("Enter")
        await page.wait_for_selector("#main", timeout=30000)

    async def _listen(self, page: Page) -> None:
        while True:
            async with self._page_lock:
                snapshot = await page.evaluate(MESSAGES_SCRIPT)
            for message in self.tracker.new_messages(snapshot):
                self.on_message(message["text"], self._reply_in(page))
            await asyncio.sleep(self.settings.whatsapp_poll_seconds)

    def _reply_in(self, page: Page) -> Reply:
        async def reply(text: str) -> None:
            async with self._page_lock:
                compose = page.locator(COMPOSE_SELECTOR).last
                await compose.click()
                lines = text.split("\n")
                for i, line in enumerate(lines):
                    if line:
                        await page.keyboard.type(line)
                    if i < len(lines) - 1:
                        await page.keyboard.press("Shift+Enter")
                await page.keyboard.press("Enter")

        return reply
