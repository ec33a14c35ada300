# inventory_client/config.py
import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_PAGE_SIZE,
    REQUEST_TIMEOUT_SECONDS,
    SEARCH_DEBOUNCE_MS,
)

_config_logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
_ENV_FILES = (
    BASE_DIR.parent / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Client settings loaded from INVENTORY_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="INVENTORY_",
        env_file=_ENV_FILES,
        extra="ignore",
    )

    api_base_url: str = DEFAULT_API_BASE_URL
    page_size: int = DEFAULT_PAGE_SIZE
    search_debounce_ms: int = SEARCH_DEBOUNCE_MS
    request_timeout: float = REQUEST_TIMEOUT_SECONDS

    # Pre-issued identity token; when empty the app prompts for sign-in
    identity_token: str = ""

    # Logging: app-wide level and outbound HTTP (httpx / httpcore)
    log_level: str = "INFO"
    log_level_http: str = "WARNING"

    @property
    def search_debounce_seconds(self) -> float:
        return max(0, self.search_debounce_ms) / 1000.0


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    _config_logger.debug("Loaded settings for %s", settings.api_base_url)
    return settings
