# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Create enrollments table.

Revision ID: 001_create_enrollments
Revises:
Create Date: 2025-01-15
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_create_enrollments"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the enrollments table and its lookup indexes."""
    op.create_table(
        "enrollments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("student", sa.String(64), nullable=False),
        sa.Column("course", sa.String(64), nullable=False),
        sa.Column("semester", sa.String(32), nullable=False),
        sa.Column("grades", sa.JSON, nullable=False),
        sa.Column("final_grade", sa.Float, nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_enrollments_student", "enrollments", ["student"])
    op.create_index("ix_enrollments_course", "enrollments", ["course"])
    op.create_index("ix_enrollments_semester", "enrollments", ["semester"])
    op.create_index("ix_enrollments_active", "enrollments", ["active"])


def downgrade() -> None:
    """Drop the enrollments table."""
    op.drop_index("ix_enrollments_active", table_name="enrollments")
    op.drop_index("ix_enrollments_semester", table_name="enrollments")
    op.drop_index("ix_enrollments_course", table_name="enrollments")
    op.drop_index("ix_enrollments_student", table_name="enrollments")
    op.drop_table("enrollments")
