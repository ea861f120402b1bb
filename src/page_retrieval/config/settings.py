"""Process settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration.  Every
variable is read with the ``PAGE_RETRIEVAL_`` prefix, e.g.
``PAGE_RETRIEVAL_NAVIGATION_TIMEOUT=45``.

Usage::

    from page_retrieval.config.settings import get_settings

    settings = get_settings()
    timeout = settings.request_timeout
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Retrieval configuration backed by environment variables and an optional .env file.

    Every field has a default, so the service runs with no environment at all.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAGE_RETRIEVAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    log_level: str = "INFO"
    """Logging verbosity.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    # ------------------------------------------------------------------
    # HTTP transport
    # ------------------------------------------------------------------

    request_timeout: float = Field(default=30.0, gt=0)
    """Timeout in seconds applied to every plain HTTP request."""

    follow_redirects: bool = True
    """Follow 3xx redirects before reporting the final response."""

    # ------------------------------------------------------------------
    # Headless browser
    # ------------------------------------------------------------------

    navigation_timeout: float = Field(default=30.0, gt=0)
    """Upper bound in seconds for one full render (launch, navigate, serialize).

    A render exceeding it is cancelled and its browser closed."""

    max_concurrent_renders: int = Field(default=2, ge=1)
    """How many browser instances may be alive at once.  Further render
    requests wait for a free slot."""

    headless: bool = True
    """Launch Chromium headless.  Set to ``False`` only when debugging locally."""

    # ------------------------------------------------------------------
    # Payload cache
    # ------------------------------------------------------------------

    cache_ttl_seconds: float = Field(default=36000.0, gt=0)
    """Lifetime of an extracted payload in the cache.  Defaults to 10 hours."""

    cache_check_period: float = Field(default=120.0, gt=0)
    """Minimum interval in seconds between sweeps that drop expired entries."""

    # ------------------------------------------------------------------
    # Last rendered document
    # ------------------------------------------------------------------

    last_log_path: str = "last.log"
    """File that holds the most recently persisted rendered document."""


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings singleton.

    In tests, call ``get_settings.cache_clear()`` after patching environment
    variables.
    """
    return Settings()
