"""Create snippets table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `snippets` table and its index on `created`.
Rollback: downgrade() drops the table (all snippets are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "snippets",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        # Naive DATETIME holding UTC, written with UTC_TIMESTAMP()
        sa.Column("created", sa.DateTime(), nullable=False),
        sa.Column("expires", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Serves ORDER BY created DESC LIMIT 10 on the home page
    op.create_index("idx_snippets_created", "snippets", ["created"])


def downgrade() -> None:
    op.drop_index("idx_snippets_created", table_name="snippets")
    op.drop_table("snippets")
