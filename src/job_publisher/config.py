from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the absolute path to the project root
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_SESSION_DIR = str(PROJECT_ROOT / ".whatsapp_session")

DEFAULT_CONTENT_MODELS = (
    "openrouter:google/gemini-2.0-flash-001,"
    "gemini:gemini-2.0-flash,"
    "gemini:gemini-1.5-flash"
)
DEFAULT_PARSER_MODEL = "openrouter:google/gemini-2.0-flash-001"


class Settings(BaseSettings):
    """
    Centralized runtime configuration for the publisher, the bot and the tools.
    Credentials default to empty; the adapter that needs one complains on first use.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Blogger ---
    google_client_id: str = Field(default="", validation_alias="GOOGLE_CLIENT_ID")
    google_client_secret: str = Field(default="", validation_alias="GOOGLE_CLIENT_SECRET")
    google_refresh_token: str = Field(default="", validation_alias="GOOGLE_REFRESH_TOKEN")
    blog_id: str = Field(default="", validation_alias="BLOG_ID")

    # --- LLM providers ---
    gemini_api_key: str = Field(default="", validation_alias="GEMINI_API_KEY")
    openrouter_api_key: str = Field(default="", validation_alias="OPENROUTER_API_KEY")
    openrouter_referer: str = Field(default="http://localhost:3000", validation_alias="OPENROUTER_REFERER")
    openrouter_title: str = Field(default="Blogger Publisher Bot", validation_alias="OPENROUTER_TITLE")
    openrouter_timeout_seconds: float = Field(default=120.0, validation_alias="OPENROUTER_TIMEOUT_SECONDS")
    content_models: str = Field(default=DEFAULT_CONTENT_MODELS, validation_alias="CONTENT_MODELS")
    parser_model: str = Field(default=DEFAULT_PARSER_MODEL, validation_alias="PARSER_MODEL")

    # --- Pipeline ---
    batch_delay_seconds: float = Field(default=2.0, validation_alias="BATCH_DELAY_SECONDS")

    # --- Web servers ---
    port: int = Field(default=3000, validation_alias="PORT")
    auth_helper_port: int = Field(default=3000, validation_alias="AUTH_HELPER_PORT")

    # --- WhatsApp transport ---
    whatsapp_session_dir: str = Field(default=DEFAULT_SESSION_DIR, validation_alias="WHATSAPP_SESSION_DIR")
    whatsapp_chat_name: str = Field(default="", validation_alias="WHATSAPP_CHAT_NAME")
    whatsapp_poll_seconds: float = Field(default=2.0, validation_alias="WHATSAPP_POLL_SECONDS")
    chromium_path: str = Field(
        default="",
        validation_alias=AliasChoices("CHROMIUM_PATH", "PUPPETEER_EXECUTABLE_PATH"),
    )
    headless: bool = Field(default=True, validation_alias="HEADLESS")

    # --- Diagnostics ---
    memory_log_interval_seconds: int = Field(default=30, validation_alias="MEMORY_LOG_INTERVAL_SECONDS")

    @property
    def content_model_list(self) -> List[str]:
        return [m.strip() for m in self.content_models.split(",") if m.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
