"""Enrollment Records Service.

Manages student course enrollments with per-evaluation grades, a weighted
final grade, role-based access and soft deletion.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
