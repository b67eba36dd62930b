# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migrations package.

Revisions live in ``versions`` and are applied in order by the runner.
"""

from src.infrastructure.database.migrations.runner import (
    MIGRATIONS,
    get_migration_status,
    get_pending_migrations,
    run_migrations,
)

__all__ = [
    "MIGRATIONS",
    "run_migrations",
    "get_migration_status",
    "get_pending_migrations",
]
