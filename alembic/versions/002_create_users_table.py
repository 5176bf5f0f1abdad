"""Create users table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `users` table with a unique constraint on email.
Why:   Session authentication: signup, login, and per-request existence checks.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        # bcrypt hashes are always 60 characters
        sa.Column("hashed_password", sa.CHAR(60), nullable=False),
        sa.Column("created", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="users_uc_email"),
    )


def downgrade() -> None:
    op.drop_table("users")
