"""
Exception hierarchy shared by the pipeline, the adapters and the entry points.
"""
from typing import Iterable, Optional


class PublisherError(Exception):
    """Base exception for publishing errors."""

    pass


class ConfigurationError(PublisherError):
    """Raised when a required credential or setting is missing."""

    pass


class ValidationError(PublisherError):
    """Raised when job fields are missing required values."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required job fields: {', '.join(self.missing)}")


class ParseError(PublisherError):
    """Raised when a chat message could not be turned into job fields."""

    pass


class ProviderError(PublisherError):
    """Raised when a completion provider rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class QuotaExceededError(ProviderError):
    """The provider refused the request because a rate limit or quota was hit."""

    pass


class ModelNotFoundError(ProviderError):
    """The provider does not know the requested model."""

    pass


class GenerationExhausted(PublisherError):
    """Raised when every content model candidate was skipped."""

    def __init__(self, attempted: Iterable[str]):
        self.attempted = list(attempted)
        super().__init__(
            "All available AI models are currently overwhelmed or hitting quota. "
            "Please wait 1 minute and try again."
        )


class StoreError(PublisherError):
    """Raised when a post store operation fails."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")
