"""
Bot lifecycle status shared with the status web app.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ..logging_config import setup_logging

logger = setup_logging(__name__)


class BotState(str, Enum):
    STARTING = "starting"
    AWAITING_SCAN = "awaiting_scan"
    AUTHENTICATED = "authenticated"
    READY = "ready"
    FAILED = "failed"


# A fresh QR may arrive while waiting for a scan or after the session drops.
TRANSITIONS = {
    BotState.STARTING: {BotState.AWAITING_SCAN, BotState.AUTHENTICATED, BotState.FAILED},
    BotState.AWAITING_SCAN: {BotState.AWAITING_SCAN, BotState.AUTHENTICATED, BotState.FAILED},
    BotState.AUTHENTICATED: {BotState.READY, BotState.AWAITING_SCAN, BotState.FAILED},
    BotState.READY: {BotState.AWAITING_SCAN, BotState.FAILED},
    BotState.FAILED: {BotState.FAILED},
}


class BotStatus:
    """Current lifecycle state, last QR code and last captured error."""

    def __init__(self):
        self.state = BotState.STARTING
        self.qr: Optional[str] = None
        self.qr_time: Optional[str] = None
        self.error: Optional[str] = None
        self.updated_at = datetime.now()

    def _move(self, target: BotState) -> bool:
        if target not in TRANSITIONS[self.state]:
            logger.warning(f"Ignoring status transition {self.state.value} -> {target.value}")
            return False
        self.state = target
        self.updated_at = datetime.now()
        return True

    def qr_received(self, qr: str) -> bool:
        if not self._move(BotState.AWAITING_SCAN):
            return False
        self.qr = qr
        self.qr_time = self.updated_at.strftime("%H:%M:%S")
        return True

    def authenticated(self) -> bool:
        if not self._move(BotState.AUTHENTICATED):
            return False
        self.qr = None
        return True

    def ready(self) -> bool:
        return self._move(BotState.READY)

    def failed(self, error: str) -> bool:
        if not self._move(BotState.FAILED):
            return False
        self.error = error
        return True

    def snapshot(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "error": self.error,
            "qr_available": self.qr is not None,
            "qr_time": self.qr_time,
            "updated_at": self.updated_at.isoformat(),
        }
