#!/usr/bin/env python3
"""
Blogger OAuth helper.

Serves a consent redirect on http://localhost:<port>/ and prints the refresh
token returned to /oauth2callback, then stops.
Usage: job-publisher-auth
"""

import sys
from typing import Callable, Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, RedirectResponse
from google_auth_oauthlib.flow import Flow

from ..config import Settings, get_settings
from ..logging_config import setup_logging
from ..services.blogger.store import BLOGGER_SCOPES, TOKEN_URI

logger = setup_logging("auth_helper")

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"


def build_flow(settings: Settings, port: int) -> Flow:
    client_config = {
        "web": {
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret,
            "auth_uri": AUTH_URI,
            "token_uri": TOKEN_URI,
        }
    }
    return Flow.from_client_config(
        client_config,
        scopes=BLOGGER_SCOPES,
        redirect_uri=f"http://localhost:{port}/oauth2callback",
    )


def create_auth_app(flow: Flow, on_token: Optional[Callable[[str], None]] = None) -> FastAPI:
    app = FastAPI(title="Blogger OAuth Helper")

    @app.get("/")
    def authorize():
        url, _ = flow.authorization_url(access_type="offline", prompt="consent")
        return RedirectResponse(url)

    @app.get("/oauth2callback", response_class=PlainTextResponse)
    def oauth2callback(code: str = ""):
        try:
            flow.fetch_token(code=code)
        except Exception as e:
            logger.error(f"Error during authentication: {e}")
            return PlainTextResponse(f"Error during authentication: {e}", status_code=400)

        refresh_token = flow.credentials.refresh_token
        print("\nTokens received!")
        print("------------------")
        print(f"REFRESH_TOKEN: {refresh_token}")
        print("------------------")
        print("Add this REFRESH_TOKEN to your .env file as GOOGLE_REFRESH_TOKEN.")
        if on_token is not None:
            on_token(refresh_token)
        return "Authentication successful! Check your terminal for the refresh token."

    return app


def main() -> int:
    load_dotenv()
    settings = get_settings()
    if not settings.google_client_id or not settings.google_client_secret:
        print("GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET are required in .env", file=sys.stderr)
        return 1

    port = settings.auth_helper_port
    server: Optional[uvicorn.Server] = None

    def stop(_token: str) -> None:
        server.should_exit = True

    app = create_auth_app(build_flow(settings, port), on_token=stop)
    server = uvicorn.Server(uvicorn.Config(app, host="localhost", port=port, log_level="warning"))
    print(f"Open http://localhost:{port} in your browser to authorize the bot.")
    server.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
