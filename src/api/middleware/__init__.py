# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

This package contains middleware for request processing:
- auth: JWT authentication and principal extraction
"""

from src.api.middleware.auth import AuthMiddleware, get_current_principal

__all__ = [
    "AuthMiddleware",
    "get_current_principal",
]
