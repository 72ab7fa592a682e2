#!/usr/bin/env python3
"""
Bot Status Web App

Health check and QR login pages for the WhatsApp bot.
"""

import html
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import quote

from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from ..logging_config import MetricsLogger, setup_logging
from .status import BotState, BotStatus

logger = setup_logging(__name__)

QR_IMAGE_URL = "https://api.qrserver.com/v1/create-qr-code/?size=300x300&data={data}"

ERROR_PAGE = """
<h1>🚨 Bot Failed to Start</h1>
<p><strong>Error Details:</strong></p>
<pre style="background:#eee; padding:15px; border-radius:5px;">{error}</pre>
"""

QR_ERROR_PAGE = """
<div style="font-family:sans-serif; text-align:center; color:#721c24; margin-top:50px;">
    <h1>⚠️ Bot Failed to Start</h1>
    <p>Please check the error below and the service logs.</p>
    <div style="text-align:left; background:#f8d7da; padding:20px; max-width:800px; margin:20px auto; overflow:auto; border-radius:10px; border:1px solid #f5c6cb;">
        <pre>{error}</pre>
    </div>
    <button onclick="location.reload()" style="padding:10px 20px;">Retry</button>
</div>
"""

STARTING_PAGE = """
<div style="font-family:sans-serif; text-align:center; margin-top:50px;">
    <h2>Bot is Starting... ⏳</h2>
    <p>Waiting for QR code from WhatsApp.</p>
    <p>This page will auto-refresh every 5 seconds.</p>
    <script>setTimeout(() => location.reload(), 5000);</script>
</div>
"""

LINKED_PAGE = """
<div style="font-family:sans-serif; text-align:center; margin-top:50px;">
    <h2 style="color:#25d366;">WhatsApp is linked ✅</h2>
    <p>Status: {state}</p>
    <p><a href="/">Back</a></p>
</div>
"""

QR_PAGE = """
<html>
    <head>
        <title>WhatsApp Bot Login</title>
        <meta name="viewport" content="width=device-width, initial-scale=1">
    </head>
    <body style="display:flex; flex-direction:column; align-items:center; justify-content:center; min-height:100vh; font-family:sans-serif; background:#f0f2f5; margin:0; padding:20px; box-sizing:border-box;">
        <div style="background:white; padding:30px; border-radius:15px; box-shadow:0 4px 12px rgba(0,0,0,0.1); text-align:center; max-width:400px; width:100%;">
            <h2 style="color:#25d366;">Scan with WhatsApp</h2>
            <img src="{image_url}" alt="QR Code" style="border:10px solid white; box-shadow:0 2px 5px rgba(0,0,0,0.1); margin:20px 0; max-width:100%;">
            <p style="color:#666; font-size:14px;">Last updated: {qr_time}</p>
            <button onclick="location.reload()" style="margin-top:20px; padding:10px 20px; background:#25d366; color:white; border:none; border-radius:5px; cursor:pointer; font-weight:bold;">Refresh Code</button>
        </div>
        <script>setTimeout(() => location.reload(), 20000);</script>
    </body>
</html>
"""


def create_status_app(status: BotStatus, metrics: Optional[MetricsLogger] = None) -> FastAPI:
    """Build the status app around the given status record."""
    app = FastAPI(
        title="Blogger Publisher Bot",
        description="Health check and QR login for the WhatsApp publisher bot",
        version="1.0.0",
    )

    @app.get("/", response_class=HTMLResponse)
    async def index():
        if status.error:
            return HTMLResponse(ERROR_PAGE.format(error=html.escape(status.error)), status_code=500)
        return HTMLResponse('Bot is running! 🚀 <br><br> <a href="/qr">View QR Code</a>')

    @app.get("/qr", response_class=HTMLResponse)
    async def qr_page():
        logger.info(f"QR page accessed at {datetime.now().strftime('%H:%M:%S')}")
        if status.error:
            return HTMLResponse(QR_ERROR_PAGE.format(error=html.escape(status.error)), status_code=500)
        if status.state in (BotState.AUTHENTICATED, BotState.READY):
            return HTMLResponse(LINKED_PAGE.format(state=status.state.value))
        if not status.qr:
            return HTMLResponse(STARTING_PAGE)
        image_url = QR_IMAGE_URL.format(data=quote(status.qr, safe=""))
        return HTMLResponse(QR_PAGE.format(image_url=html.escape(image_url), qr_time=status.qr_time))

    @app.get("/health")
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint."""
        body: Dict[str, Any] = {
            "status": "unhealthy" if status.state == BotState.FAILED else "healthy",
            "timestamp": datetime.now().isoformat(),
            "bot": status.snapshot(),
        }
        if metrics is not None:
            body["metrics"] = metrics.log_process_metrics()
            body["system"] = metrics.log_system_metrics()
        return body

    return app
