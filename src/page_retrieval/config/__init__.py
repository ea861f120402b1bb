"""Configuration package for the page retrieval service.

Re-exports the settings symbols so that callers can write::

    from page_retrieval.config import get_settings
"""

from __future__ import annotations

from page_retrieval.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
