"""
Blogger v3 post store.

Each operation maps one-to-one onto a Blogger API call. Failures surface as
StoreError; nothing is retried and no compensating call is made.
"""
import asyncio
from typing import Any, List, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ...config import Settings
from ...errors import ConfigurationError, StoreError
from ...logging_config import setup_logging
from ...models import GeneratedPost

logger = setup_logging(__name__)

BLOGGER_SCOPES = ["https://www.googleapis.com/auth/blogger"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

STORE_ERRORS = (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError)


def _error_message(error: Exception) -> str:
    if isinstance(error, HttpError):
        return getattr(error, "reason", None) or str(error)
    return str(error) or type(error).__name__


class BloggerStore:
    """Create, update, fetch, list and delete posts on one blog."""

    def __init__(self, settings: Settings, service: Optional[Any] = None):
        self.settings = settings
        self._service = service

    @property
    def blog_id(self) -> str:
        if not self.settings.blog_id:
            raise ConfigurationError("BLOG_ID is missing from .env")
        return self.settings.blog_id

    @property
    def service(self):
        if self._service is None:
            missing = [
                name
                for name, value in (
                    ("GOOGLE_CLIENT_ID", self.settings.google_client_id),
                    ("GOOGLE_CLIENT_SECRET", self.settings.google_client_secret),
                    ("GOOGLE_REFRESH_TOKEN", self.settings.google_refresh_token),
                )
                if not value
            ]
            if missing:
                raise ConfigurationError(f"Missing Blogger credentials: {', '.join(missing)}")
            credentials = Credentials(
                token=None,
                refresh_token=self.settings.google_refresh_token,
                client_id=self.settings.google_client_id,
                client_secret=self.settings.google_client_secret,
                token_uri=TOKEN_URI,
                scopes=BLOGGER_SCOPES,
            )
            self._service = build("blogger", "v3", credentials=credentials, cache_discovery=False)
        return self._service

    async def _execute(self, operation: str, request_factory) -> Any:
        """Build and execute one request in a worker thread."""
        blog_id = self.blog_id
        service = self.service
        try:
            return await asyncio.to_thread(lambda: request_factory(service.posts(), blog_id).execute())
        except STORE_ERRORS as e:
            message = _error_message(e)
            logger.error(f"Error during {operation}: {message}", extra={"operation": operation})
            raise StoreError(operation, message) from e

    async def create(
        self, title: str, html: str, is_draft: bool = True, labels: Optional[List[str]] = None
    ) -> GeneratedPost:
        body = {"title": title, "content": html, "labels": list(labels or [])}
        data = await self._execute(
            "create",
            lambda posts, blog_id: posts.insert(blogId=blog_id, isDraft=is_draft, body=body),
        )
        logger.info("Post created", extra={"post_id": data.get("id"), "is_draft": is_draft})
        return GeneratedPost.from_api(data)

    async def update(self, post_id: str, title: str, html: str) -> GeneratedPost:
        body = {"title": title, "content": html}
        data = await self._execute(
            "update",
            lambda posts, blog_id: posts.update(blogId=blog_id, postId=post_id, body=body),
        )
        logger.info("Post updated", extra={"post_id": post_id})
        return GeneratedPost.from_api(data)

    async def get(self, post_id: str) -> GeneratedPost:
        data = await self._execute(
            "get",
            lambda posts, blog_id: posts.get(blogId=blog_id, postId=post_id),
        )
        return GeneratedPost.from_api(data)

    async def list(self, max_results: int = 10) -> List[GeneratedPost]:
        data = await self._execute(
            "list",
            lambda posts, blog_id: posts.list(blogId=blog_id, maxResults=max_results),
        )
        return [GeneratedPost.from_api(item) for item in (data or {}).get("items") or []]

    async def delete(self, post_id: str) -> bool:
        await self._execute(
            "delete",
            lambda posts, blog_id: posts.delete(blogId=blog_id, postId=post_id),
        )
        logger.info("Post deleted", extra={"post_id": post_id})
        return True
