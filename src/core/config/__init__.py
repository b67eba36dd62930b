# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the enrollment service.

Settings are Pydantic-based and loaded from environment variables.

Example:
    >>> from src.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.course_catalog.base_url)
    'http://localhost:4000'
"""

from src.core.config.settings import (
    APISettings,
    CORSSettings,
    CourseCatalogSettings,
    DatabaseSettings,
    JWTSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "CourseCatalogSettings",
    "JWTSettings",
    "CORSSettings",
    "APISettings",
]
