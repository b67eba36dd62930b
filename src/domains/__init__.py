# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for the enrollment service.

This package contains domain services that encapsulate business logic.

Domains:
    auth: Access token creation and validation.
    enrollment: Enrollment records, grading, access policy and controller.
"""
