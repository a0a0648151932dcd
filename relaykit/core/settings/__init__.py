"""Modular Pydantic Settings configuration.

One settings class per domain, each with its own environment prefix, exposed
through LRU-cached loaders:

    from relaykit.core.settings import get_pagination_settings

    ceiling = get_pagination_settings().max_page_size
"""

from __future__ import annotations

from .app import AppSettings
from .identity import IdentitySettings
from .loader import (
    clear_settings_cache,
    get_app_settings,
    get_identity_settings,
    get_logging_settings,
    get_pagination_settings,
)
from .logs import LoggingSettings
from .pagination import PaginationSettings

__all__ = [
    "AppSettings",
    "IdentitySettings",
    "LoggingSettings",
    "PaginationSettings",
    "clear_settings_cache",
    "get_app_settings",
    "get_identity_settings",
    "get_logging_settings",
    "get_pagination_settings",
]
